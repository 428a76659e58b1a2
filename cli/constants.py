"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["info", "upload", "download", "permission", "users", "gateway", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2E86DE bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;46;134;222m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
  _____ _ _         ____       _
 |  ___(_) | ___   / ___| __ _| |_ _____      ____ _ _   _
 | |_  | | |/ _ \\ | |  _ / _` | __/ _ \\ \\ /\\ / / _` | | | |
 |  _| | | |  __/ | |_| | (_| | ||  __/\\ V  V / (_| | |_| |
 |_|   |_|_|\\___|  \\____|\\__,_|\\__\\___| \\_/\\_/ \\__,_|\\__, |
                                                     |___/
{RESET}"""

WELCOME_TITLE = "File Gateway CLI"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "gateway> "

UPLOADS_DIR = "uploads"
DOWNLOADS_DIR = "downloads"

HELP_TEXT = """Available commands:
  info <file_id>                      Show file metadata
  upload <path> [file_id]             Upload a local file (file_id defaults to the file name)
  download <file_id> [output_path]    Download a file and verify its digest (default: downloads/)
  permission <file_id>                Show capabilities on a file
  users <user_id> [user_id ...]       Look up users
  gateway [<host> <port>]             Show or change the gateway address
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  upload uploads/report.pdf
  upload uploads/report.pdf report_pdf
  info report.pdf
  download report.pdf downloads/copy.pdf
  permission report.pdf
  users system alice
  gateway files.internal 3000"""
