CONFIG_FILENAME = "gpgtext.yaml"  # optional, in the working directory
GNUPGHOME_ENV = "GNUPGHOME"  # overrides 'gnupghome:' from the config file
GPGBINARY_DEFAULT = "gpg"
PASSPHRASE_ENV_DEFAULT = "GPGTEXT_PASSPHRASE"  # name of the env var holding the symmetric passphrase
TEXT_ENCODING = "utf8"  # for all text crossing the caller-facing surface
ERRORCODE_UNKNOWN = -1  # BackendError.code when gpg gave no return code
MSG_NO_KEYS_FOUND = "Error! No keys found..."
MSG_KEYLISTING_FAILED = "Error! Key listing failed"
ERRORMSG_SEPARATOR = "; "  # joins the parts of OperationResult.error_message
