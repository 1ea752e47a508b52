"""Constants for Device model field names"""


class DeviceFields:
    """Field name constants for Device documents (camelCase, as stored)"""
    ID = "id"
    TITLE = "title"
    DESCRIPTION = "description"
    MANUFACTURER = "manufacturer"
    DEVICE_MODEL = "deviceModel"
    CONDITION = "condition"
    BATTERY_CAPACITY = "batteryCapacity"
    WEIGHT = "weight"
    TYPE_C = "typeC"
    TYPE_A = "typeA"
    SOCKETS = "sockets"
    REMOTE_USE = "remoteUse"
    DIMENSIONS = "dimensions"
    BATTERY_TYPE = "batteryType"
    SIGNAL_SHAPE = "signalShape"
    ADDITIONAL = "additional"
    IMAGES = "images"
    PRICE = "price"
    MIN_RENT_TERM = "minRentTerm"
    MAX_RENT_TERM = "maxRentTerm"
    POLICY_AGREEMENT = "policyAgreement"
    IS_IN_RENT = "isInRent"
    OWNER_ID = "ownerId"

    # Form-only field, consumed at creation
    IMAGE_DIMENSIONS = "imageDimensions"

    # Image sub-document
    IMAGE_URL = "url"
    IMAGE_WIDTH = "width"
    IMAGE_HEIGHT = "height"

    # MongoDB specific
    MONGO_ID = "_id"  # MongoDB's internal _id field

    # Never writable through the update path
    IMMUTABLE = (MONGO_ID, ID, OWNER_ID)
