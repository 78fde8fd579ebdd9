from filederive.storage.base import Location
from filederive.storage.file import FileLocation
from filederive.storage.http import HttpLocation
from filederive.storage.registry import from_uri, location_class_for, register_location, registered_schemes
from filederive.storage.s3 import S3Location
from filederive.storage.sqs import SqsLocation

register_location("file", FileLocation)
register_location("http", HttpLocation)
register_location("https", HttpLocation)
register_location("s3", S3Location)
register_location("sqs", SqsLocation)

__all__ = [
    "FileLocation",
    "HttpLocation",
    "Location",
    "S3Location",
    "SqsLocation",
    "from_uri",
    "location_class_for",
    "register_location",
    "registered_schemes",
]
