"""Constants for User model field names"""


class UserFields:
    """Field name constants for User documents"""
    NAME = "name"
    SURNAME = "surname"
    PHONE_NUMBER = "phoneNumber"
    TOWN = "town"
    STREET = "street"
    REGION = "region"

    # MongoDB specific
    MONGO_ID = "_id"  # MongoDB's internal _id field

    # Owner projections used when expanding device.ownerId
    OWNER_DETAIL_PROJECTION = (NAME, SURNAME, PHONE_NUMBER, TOWN, STREET, REGION)
    OWNER_TOWN_PROJECTION = (TOWN,)
