"""Shell constants and API routes."""

from prompt_toolkit.styles import Style

API_PREFIX = "/api"
CONFIG_PATH = f"{API_PREFIX}/config"
FILES_PATH = f"{API_PREFIX}/files"
UPLOAD_PATH = f"{API_PREFIX}/files/upload"
DOWNLOAD_PATH = f"{API_PREFIX}/files/download"
VERIFY_PIN_PATH = f"{API_PREFIX}/verify-pin"
ADMIN_LOGIN_PATH = f"{API_PREFIX}/admin/login"
ADMIN_LOGOUT_PATH = f"{API_PREFIX}/admin/logout"

UPLOAD_FIELD = "file"

NOTIFICATION_TTL_SECONDS = 5.0

DOWNLOAD_CHUNK_SIZE = 8192

COMMANDS = [
    "pin", "login", "logout", "list", "refresh", "select", "cancel", "upload",
    "download", "delete", "status", "reset", "clear", "exit", "help",
]

# Commands whose first argument is a file name from the remote listing.
REMOTE_FILE_COMMANDS = ("download", "delete")

STYLE = Style.from_dict(
    {
        "prompt": "#1D72E8 bold",
        "locked": "#F45935 bold",
    }
)

BLUE = "\033[38;2;29;114;232m"
GREEN = "\033[32m"
RED = "\033[31m"
DIM = "\033[2m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
 _                     _  ____  _
| |    ___   ___ __ _ | |/ ___|| |__   __ _ _ __ ___
| |   / _ \\ / __/ _` || |\\___ \\| '_ \\ / _` | '__/ _ \\
| |__| (_) | (_| (_| || | ___) | | | | (_| | | |  __/
|_____\\___/ \\___\\__,_||_||____/|_| |_|\\__,_|_|  \\___|
{RESET}"""

WELCOME_TITLE = "LocalShare - file sharing on your local network"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "localshare> "
LOCKED_PROMPT_TEXT = "localshare (locked)> "

HELP_TEXT = """Available commands:
  pin <pin>                           Unlock a PIN-protected server
  login <username> [password]         Admin login (password is prompted when omitted)
  logout                              End the admin session
  list                                Show the current file listing
  refresh                             Fetch the file listing from the server
  select <path>                       Choose a local file to upload
  cancel                              Drop the selected file
  upload [path]                       Upload the selected file (or select <path> first)
  download <filename> [dest_dir]      Download a file (defaults to the download directory)
  delete <filename>                   Delete a file after confirmation
  status                              Show connection and session state
  reset                               Forget the local session state and start over
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit

Examples:
  pin 1234
  login admin
  upload ~/Documents/report.pdf
  download "holiday photo.jpg" ~/Pictures
  delete report.pdf"""
