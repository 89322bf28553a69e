VERSION = "0.1.0"
NAME = "regskin"

SERVER_BANNER = f"{NAME} {VERSION}"
