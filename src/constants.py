"""All magic values live here — no inline literals anywhere else."""

# Telegram chat action re-send interval (seconds).
# A chat action expires after ~5 s, so we refresh every 4 s.
TELEGRAM_ACTION_INTERVAL: float = 4.0
TELEGRAM_MAX_MESSAGE = 4096

# Answer providers
PROVIDER_GEMINI = "gemini"
PROVIDER_OPENAI = "openai"
PROVIDER_CLAUDE = "claude"
DEFAULT_ANSWER_PROVIDER = PROVIDER_GEMINI

# Credential lookup: API_KEY wins, then the provider's conventional variable.
GENERIC_API_KEY_ENV = "API_KEY"
PROVIDER_API_KEY_ENV = {
    PROVIDER_GEMINI: "GEMINI_API_KEY",
    PROVIDER_OPENAI: "OPENAI_API_KEY",
    PROVIDER_CLAUDE: "ANTHROPIC_API_KEY",
}
DEFAULT_MODELS = {
    PROVIDER_GEMINI: "gemini-2.5-flash",
    PROVIDER_OPENAI: "gpt-4o",
    PROVIDER_CLAUDE: "claude-sonnet-4-5-20250929",
}
DEFAULT_BASE_URLS = {
    PROVIDER_GEMINI: "https://generativelanguage.googleapis.com/v1beta/openai/",
}
CLAUDE_MAX_TOKENS = 1024

ANSWER_PROMPT = (
    "You are an expert AI agent specializing in reasoning and solving "
    "multiple-choice questions (MCQs). Analyze the provided image and answer "
    "any questions within it. Provide a clear and concise explanation for "
    "your reasoning. If there are no clear questions, describe what you see "
    "and what potential questions could be asked."
)

# Images
JPEG_MIME = "image/jpeg"
JPEG_EXTENSION = ".jpg"
DEFAULT_IMAGE_MIME = JPEG_MIME

# Camera
CAMERA_MAX_DEVICES = 4
DEFAULT_ZOOM_RANGE = "1,5,0.1"
FOCUS_INDICATOR_SECONDS: float = 1.0
FOCUS_RING_RADIUS = 32
FOCUS_RING_COLOR = (0, 215, 255)  # BGR yellow
FOCUS_RING_THICKNESS = 2
CAMERA_LABEL = "Camera %d"

# Log messages
MSG_BOT_STARTING = "Starting Telegram bot…"
MSG_BLOCKED_CHAT = "Blocked update from chat_id: %s"
MSG_SEND_OK = "✓ Sent (%.1fs)"
MSG_SEND_FAIL = "✗ Send failed (%.1fs)"
MSG_PROVIDER_READY = "Answer provider: %s (%s)"
MSG_REQUESTING_ANSWER = "→ %s (%s, %d base64 chars)"
MSG_STALE_RESULT = "Discarding stale answer for request %d"
MSG_CAMERA_OPENED = "Camera %s opened (%d device(s) found)"
MSG_CAMERA_RELEASED = "Camera %s released"
MSG_CAMERA_OPEN_ABANDONED = "Camera %s released: closed while opening"
MSG_CAMERA_SWITCH_NOOP = "Camera switch ignored: %d device(s)"

# User-facing replies
MSG_IMAGE_READY = "Image received — send /answer to solve it, or /reset to start over."
MSG_IMAGE_CAPTURED = "Photo captured — send /answer to solve it, or /reset to start over."
MSG_NO_IMAGE = "No image yet — send a photo or use /camera first."
MSG_ANSWER_FAILED = "Failed to get answer: %s"
MSG_ANSWER_IN_PROGRESS = "Still thinking about the current image…"
MSG_UNEXPECTED_ERROR = "An unknown error occurred."
MSG_RESET = "Cleared — send a new photo or use /camera."
MSG_READ_FAILED = "Failed to read the image file. Please try again."
MSG_EMPTY_FILE = "The file is empty."

MSG_CAMERA_NOT_FOUND = "No camera device was found on this machine."
MSG_CAMERA_UNAVAILABLE = (
    "Could not access camera. Please ensure you have granted permission and "
    "that your camera is not in use by another application."
)
MSG_CAMERA_NO_FRAME = "The camera did not deliver a frame."
MSG_CAMERA_ENCODE_FAILED = "Could not encode the camera frame."
MSG_CAMERA_NOT_OPEN = "The camera is not open — use /camera first."
MSG_CAMERA_READY = "%s ready (%d camera(s) available).%s\n/snap to capture, /cancel to close."
MSG_CAMERA_ZOOM_HINT = " Zoom %.2f (range %.2f–%.2f, step %.2f)."
MSG_CAMERA_SWITCHED = "Switched to %s."
MSG_CAMERA_SINGLE = "Only one camera available."
MSG_CAMERA_CLOSED = "Camera closed."
MSG_ZOOM_SET = "Zoom set to %.2f."
MSG_ZOOM_UNSUPPORTED = "This camera does not support zoom."
MSG_ZOOM_USAGE = "Usage: /zoom <value>"
MSG_FOCUS_SET = "Focus indicator at (%d, %d)."
MSG_FOCUS_USAGE = "Usage: /focus <x> <y>"

# Commands
CMD_ANSWER = "answer"
CMD_RESET = "reset"
CMD_CAMERA = "camera"
CMD_PREVIEW = "preview"
CMD_SWITCH = "switch"
CMD_ZOOM = "zoom"
CMD_FOCUS = "focus"
CMD_SNAP = "snap"
CMD_CANCEL = "cancel"
CMD_STATUS = "status"
CMD_HELP = "help"

MSG_STATUS = (
    "Status\n"
    "  Provider : %s (%s)\n"
    "  Image    : %s\n"
    "  Answer   : %s\n"
    "  Camera   : %s\n"
)

MSG_HELP = (
    "snap-answer — photograph a question, get the answer\n"
    "\n"
    "Image:\n"
    "  Photo / image file       — set the current image\n"
    "  /answer                  — solve the current image\n"
    "  /reset                   — discard image and answer\n"
    "\n"
    "Camera (attached to the bot host):\n"
    "  /camera                  — open the camera and show a preview\n"
    "  /preview                 — show a fresh preview\n"
    "  /switch                  — next camera\n"
    "  /zoom <value>            — set zoom\n"
    "  /focus <x> <y>           — mark a focus point on the preview\n"
    "  /snap                    — capture a photo\n"
    "  /cancel                  — close the camera\n"
    "\n"
    "  /status                  — current state at a glance\n"
)
