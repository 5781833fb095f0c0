"""Tag identifiers for the HEIF and ICC directories."""

from enum import IntEnum


class HeifTag(IntEnum):
    """Values recorded while walking a HEIF container."""

    MAJOR_BRAND = 1
    MINOR_VERSION = 2
    COMPATIBLE_BRANDS = 3
    HANDLER_TYPE = 4
    PRIMARY_ITEM_ID = 5
    ITEM_COUNT = 6
    EXIF_ITEM_IDS = 7
    IMAGE_WIDTH = 8
    IMAGE_HEIGHT = 9
    IMAGE_ROTATION = 10
    COLOUR_TYPE = 11
    COLOUR_PRIMARIES = 12
    TRANSFER_CHARACTERISTICS = 13
    MATRIX_COEFFICIENTS = 14
    FULL_RANGE = 15


HEIF_TAG_NAMES: dict[int, str] = {
    HeifTag.MAJOR_BRAND: "Major Brand",
    HeifTag.MINOR_VERSION: "Minor Version",
    HeifTag.COMPATIBLE_BRANDS: "Compatible Brands",
    HeifTag.HANDLER_TYPE: "Handler Type",
    HeifTag.PRIMARY_ITEM_ID: "Primary Item Reference",
    HeifTag.ITEM_COUNT: "Item Count",
    HeifTag.EXIF_ITEM_IDS: "Exif Item IDs",
    HeifTag.IMAGE_WIDTH: "Image Width",
    HeifTag.IMAGE_HEIGHT: "Image Height",
    HeifTag.IMAGE_ROTATION: "Image Rotation",
    HeifTag.COLOUR_TYPE: "Colour Format",
    HeifTag.COLOUR_PRIMARIES: "Colour Primaries",
    HeifTag.TRANSFER_CHARACTERISTICS: "Transfer Characteristics",
    HeifTag.MATRIX_COEFFICIENTS: "Matrix Coefficients",
    HeifTag.FULL_RANGE: "Full-Range Colour",
}


class IccTag(IntEnum):
    """ICC profile fields.

    Header fields are keyed by their byte offset in the profile header,
    tag-table elements by their four-character signature.
    """

    PROFILE_BYTE_COUNT = 0
    CMM_TYPE = 4
    PROFILE_VERSION = 8
    PROFILE_CLASS = 12
    COLOR_SPACE = 16
    PROFILE_CONNECTION_SPACE = 20
    PROFILE_DATETIME = 24
    SIGNATURE = 36
    PLATFORM = 40
    RENDERING_INTENT = 64
    XYZ_VALUES = 68
    PROFILE_CREATOR = 80
    TAG_COUNT = 128

    PROFILE_DESCRIPTION = 0x64657363  # desc
    COPYRIGHT = 0x63707274  # cprt
    DEVICE_MFG_DESCRIPTION = 0x646D6E64  # dmnd
    DEVICE_MODEL_DESCRIPTION = 0x646D6464  # dmdd
    MEDIA_WHITE_POINT = 0x77747074  # wtpt
    RED_COLORANT = 0x7258595A  # rXYZ
    GREEN_COLORANT = 0x6758595A  # gXYZ
    BLUE_COLORANT = 0x6258595A  # bXYZ
    LUMINANCE = 0x6C756D69  # lumi


ICC_TAG_NAMES: dict[int, str] = {
    IccTag.PROFILE_BYTE_COUNT: "Profile Size",
    IccTag.CMM_TYPE: "CMM Type",
    IccTag.PROFILE_VERSION: "Version",
    IccTag.PROFILE_CLASS: "Class",
    IccTag.COLOR_SPACE: "Color space",
    IccTag.PROFILE_CONNECTION_SPACE: "Profile Connection Space",
    IccTag.PROFILE_DATETIME: "Profile Date/Time",
    IccTag.SIGNATURE: "Signature",
    IccTag.PLATFORM: "Primary Platform",
    IccTag.RENDERING_INTENT: "Rendering Intent",
    IccTag.XYZ_VALUES: "XYZ values",
    IccTag.PROFILE_CREATOR: "Tag Creator",
    IccTag.TAG_COUNT: "Tag Count",
    IccTag.PROFILE_DESCRIPTION: "Profile Description",
    IccTag.COPYRIGHT: "Profile Copyright",
    IccTag.DEVICE_MFG_DESCRIPTION: "Device Mfg Description",
    IccTag.DEVICE_MODEL_DESCRIPTION: "Device Model Description",
    IccTag.MEDIA_WHITE_POINT: "Media White Point",
    IccTag.RED_COLORANT: "Red Colorant",
    IccTag.GREEN_COLORANT: "Green Colorant",
    IccTag.BLUE_COLORANT: "Blue Colorant",
    IccTag.LUMINANCE: "Luminance",
}
