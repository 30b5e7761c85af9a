"""Declaration discovery — turns route declarations into plain records.

Two providers ship with taproute: :class:`AnnotationProvider` for classes
decorated with :mod:`taproute.decorators`, and :class:`MappingProvider`
for declarations written as data (YAML).
"""
