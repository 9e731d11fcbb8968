"""Application-wide constants."""

APP_NAME = "resistorvision"
VERSION = "1.0.0"

# Side of the square buffer both models expect
INPUT_SIZE = 640
# YOLOv8-style heads emit 8400 proposals for a 640x640 input
NUM_PROPOSALS = 8400
NUM_COLOR_CLASSES = 12

# Tunable, not derived from any calibration run
CONFIDENCE_THRESHOLD = 0.3
IOU_THRESHOLD = 0.3

MIN_BANDS = 3
MAX_BANDS = 6

# Centre square of the photo (fraction of its width) kept before resizing
CAPTURE_CROP_FRACTION = 0.35

SUPPORTED_IMAGE_FORMATS = [".jpg", ".jpeg", ".png", ".bmp", ".webp", ".tif", ".tiff"]
