import os
from dotenv import load_dotenv

load_dotenv()

# --- Settle timing ---
# Delay applied after every drag-and-drop step so page handlers and reflow can finish.
# 0 (or unset) falls back to MIN_SETTLE_MS; the sequence never runs with a zero wait.
WAIT_TIME_MS = int(os.getenv("DRAGDROP_WAIT_TIME_MS", "0"))
MIN_SETTLE_MS = int(os.getenv("DRAGDROP_MIN_SETTLE_MS", "5"))

# Fire the informational `drag` event from the source before moving to the target.
EMIT_DRAG_EVENT = os.getenv("DRAGDROP_EMIT_DRAG_EVENT", "true").lower() == "true"

# Pointer move duration handed to ActionChains (ms)
ACTION_DURATION_MS = int(os.getenv("DRAGDROP_ACTION_DURATION_MS", "250"))

# --- Driver ---
HEADLESS = os.getenv("HEADLESS", "false").lower() == "true"
IMPLICIT_WAIT = int(os.getenv("DRAGDROP_IMPLICIT_WAIT", "3"))
# Explicit wait used when opening a plan URL
PAGE_LOAD_WAIT = int(os.getenv("DRAGDROP_PAGE_LOAD_WAIT", "10"))

# --- Instrumentation / diagnostics ---
LOG_MODE = os.getenv("DRAGDROP_LOG_MODE", "live").lower()  # live | debug | trace
LOG_FILE = os.getenv("DRAGDROP_LOG_FILE", "dragdrop.log")
LOG_RATE_LIMITS_S = {
    "GEOM.element_at_point": 0.5,
    "QUEUE.flush": 1.0,
}

# --- Plans ---
# File or folder of YAML/JSON drag plans run by src/main.py
PLAN_PATH = os.getenv("DRAGDROP_PLAN_PATH", "plans")
