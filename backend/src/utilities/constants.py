# ------------ Config ------------
CONNECTION_QUEUE_SIZE = 50    # bounded per-connection outbound queue

GLOBAL_SCOPE = "all"          # reserved: broadcast to every connection, never a group name
SEED_GROUPS = ("Friends", "Family", "Work")

# uploads
UPLOAD_DIR = "uploads"
UPLOAD_URL_PREFIX = "/uploads"
MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5MB
ALLOWED_IMAGE_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif"}
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}
# --------------------------------
