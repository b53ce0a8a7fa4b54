import enum


class Operator(str, enum.Enum):
    """Service operators a building can be signed up for.

    Offered as checkboxes on the intake form; at least one is required.
    """
    CGS = "CGS"
    FS = "FS"
    SIP = "SIP"


class FormField(str, enum.Enum):
    """Wire names of the intake form fields.

    Declared in the order parts are written to the multipart payload.
    """
    SALESMAN_NAME = "salesmanName"
    CUSTOMER_NAME = "customerName"
    CUSTOMER_ADDRESS = "customerAddress"
    CUSTOMER_HOME_NO = "customerHomeNo"
    VILLAGE = "village"
    COORDINATES = "coordinates"
    BUILDING_TYPE = "buildingType"
    OPERATORS = "operators"
    REMARKS = "remarks"
    BUILDING_PHOTOS = "buildingPhotos"


class PhotoType(str, enum.Enum):
    """Image content types accepted by the photo picker."""
    JPEG = "image/jpeg"
    PNG = "image/png"
    GIF = "image/gif"
    WEBP = "image/webp"

    @classmethod
    def file_extensions(cls):
        """Extensions offered in the file dialog."""
        return ['jpg', 'jpeg', 'png', 'gif', 'webp']
