"""Public encoding API.

Progressive disclosure from the one-call ``to_xml_string`` to the fluent,
configurable ``ArrayToXml`` converter.
"""

from .encoder import ArrayToXml, encode, to_xml_string

__all__ = ["ArrayToXml", "encode", "to_xml_string"]
