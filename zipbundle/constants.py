DEFAULT_IGNORE_FILE = ".zipignore"

ARCHIVE_EXTENSION = "zip"

COMMENT_PREFIX = "#"

STATUS_SUCCESS_TEXT = "SUCCESS"
