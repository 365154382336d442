"""Form definition vocabulary."""

from enum import Enum


class Engine(str, Enum):
    V1 = "V1"
    V2 = "V2"


class SchemaVersion(int, Enum):
    V1 = 1
    V2 = 2


class DefinitionState(str, Enum):
    DRAFT = "draft"
    LIVE = "live"


class ControllerType(str, Enum):
    START = "StartPageController"
    HOME = "HomePageController"
    PAGE = "PageController"
    TERMINAL = "TerminalPageController"
    SUMMARY = "SummaryPageController"
    STATUS = "StatusPageController"
    FILE_UPLOAD = "FileUploadPageController"
    REPEAT = "RepeatPageController"


class ComponentType(str, Enum):
    TEXT_FIELD = "TextField"
    MULTILINE_TEXT_FIELD = "MultilineTextField"
    YES_NO_FIELD = "YesNoField"
    DATE_PARTS_FIELD = "DatePartsField"
    MONTH_YEAR_FIELD = "MonthYearField"
    SELECT_FIELD = "SelectField"
    AUTOCOMPLETE_FIELD = "AutocompleteField"
    RADIOS_FIELD = "RadiosField"
    CHECKBOXES_FIELD = "CheckboxesField"
    NUMBER_FIELD = "NumberField"
    UK_ADDRESS_FIELD = "UkAddressField"
    TELEPHONE_NUMBER_FIELD = "TelephoneNumberField"
    EMAIL_ADDRESS_FIELD = "EmailAddressField"
    FILE_UPLOAD_FIELD = "FileUploadField"
    HTML = "Html"
    INSET_TEXT = "InsetText"
    DETAILS = "Details"
    LIST = "List"
    MARKDOWN = "Markdown"


class SectionRequestType(str, Enum):
    CREATE_SECTION = "CREATE_SECTION"
    DELETE_SECTION = "DELETE_SECTION"


# Pages that terminate the journey; new pages are inserted before the first one.
END_PAGE_CONTROLLERS = frozenset(
    {ControllerType.TERMINAL.value, ControllerType.SUMMARY.value, ControllerType.STATUS.value}
)

# V1 definitions name controllers by their legacy module path.
LEGACY_CONTROLLERS = {
    "./pages/start.js": ControllerType.START.value,
    "./pages/home.js": ControllerType.HOME.value,
    "./pages/page.js": ControllerType.PAGE.value,
    "./pages/summary.js": ControllerType.SUMMARY.value,
    "./pages/status.js": ControllerType.STATUS.value,
    "./pages/file-upload.js": ControllerType.FILE_UPLOAD.value,
    "./pages/repeat.js": ControllerType.REPEAT.value,
    "StartPageController": ControllerType.START.value,
    "HomePageController": ControllerType.HOME.value,
    "PageController": ControllerType.PAGE.value,
    "TerminalPageController": ControllerType.TERMINAL.value,
    "SummaryPageController": ControllerType.SUMMARY.value,
    "StatusPageController": ControllerType.STATUS.value,
    "FileUploadPageController": ControllerType.FILE_UPLOAD.value,
    "RepeatPageController": ControllerType.REPEAT.value,
}

BOOLEAN_OPTIONS = frozenset({"showReferenceNumber", "disableUserFeedback"})
