"""Protocol constants.

Keep these in one place to avoid stringly-typed PDU handling.
"""

# PDU types
GET = "GET"
GETNEXT = "GETNEXT"
GETBULK = "GETBULK"
SET = "SET"
RESPONSE = "RESPONSE"

REQUEST_TYPES = (GET, GETNEXT, GETBULK, SET)

# Value syntaxes. The last three are exception values an agent returns in
# place of a real value.
INTEGER = "integer"
STRING = "string"
OBJECT_ID = "oid"
COUNTER32 = "counter32"
COUNTER64 = "counter64"
GAUGE32 = "gauge32"
TIMETICKS = "timeticks"
IPADDRESS = "ipaddress"
NULL = "null"

NO_SUCH_OBJECT = "noSuchObject"
NO_SUCH_INSTANCE = "noSuchInstance"
END_OF_MIB_VIEW = "endOfMibView"

EXCEPTIONS = frozenset((NO_SUCH_OBJECT, NO_SUCH_INSTANCE, END_OF_MIB_VIEW))

# Error status codes
NO_ERROR = 0
TOO_BIG = 1
NO_SUCH_NAME = 2
BAD_VALUE = 3
READ_ONLY = 4
GEN_ERR = 5
NO_ACCESS = 6
WRONG_TYPE = 7
WRONG_LENGTH = 8
WRONG_ENCODING = 9
WRONG_VALUE = 10
NO_CREATION = 11
INCONSISTENT_VALUE = 12
RESOURCE_UNAVAILABLE = 13
COMMIT_FAILED = 14
UNDO_FAILED = 15
AUTHORIZATION_ERROR = 16
NOT_WRITABLE = 17
INCONSISTENT_NAME = 18

STATUS_TEXT = {
    NO_ERROR: "noError",
    TOO_BIG: "tooBig",
    NO_SUCH_NAME: "noSuchName",
    BAD_VALUE: "badValue",
    READ_ONLY: "readOnly",
    GEN_ERR: "genErr",
    NO_ACCESS: "noAccess",
    WRONG_TYPE: "wrongType",
    WRONG_LENGTH: "wrongLength",
    WRONG_ENCODING: "wrongEncoding",
    WRONG_VALUE: "wrongValue",
    NO_CREATION: "noCreation",
    INCONSISTENT_VALUE: "inconsistentValue",
    RESOURCE_UNAVAILABLE: "resourceUnavailable",
    COMMIT_FAILED: "commitFailed",
    UNDO_FAILED: "undoFailed",
    AUTHORIZATION_ERROR: "authorizationError",
    NOT_WRITABLE: "notWritable",
    INCONSISTENT_NAME: "inconsistentName",
}
