"""
Constants used throughout the application
"""

# Provider
DEFAULT_BASE_URL = "https://api.studio.nebius.com/v1/"
DEFAULT_REQUEST_TIMEOUT = 120.0
FILE_PURPOSES = ("fine-tune", "assistants", "vision", "batch")
DEFAULT_FILE_PURPOSE = "fine-tune"
FILE_STATUS_PROCESSED = "processed"
UPLOAD_CONTENT_TYPE = "application/json"

# Processing waits
UPLOAD_WAIT_MAX_RETRIES = 10
UPLOAD_WAIT_DELAY_MS = 2000
RECHECK_WAIT_MAX_RETRIES = 5
RECHECK_WAIT_DELAY_MS = 3000

# Job completion polling
JOB_POLL_MAX_ATTEMPTS = 360
JOB_POLL_DELAY_MS = 10000

# Hyperparameter names (internal -> provider wire name)
HYPERPARAMETER_WIRE_NAMES = {
    "batch_size": "batch_size",
    "learning_rate": "learning_rate_multiplier",
    "n_epochs": "n_epochs",
    "warmup_ratio": "warmup_ratio",
    "weight_decay": "weight_decay",
    "lora": "lora",
    "lora_r": "lora_r",
    "lora_alpha": "lora_alpha",
    "lora_dropout": "lora_dropout",
    "packing": "packing",
    "max_grad_norm": "max_grad_norm",
}

# Words in a provider failure that point at the training data
FORMAT_ERROR_KEYWORDS = ("format", "messages", "role", "content")

# Dataset validation
DATASET_EXTENSION = ".jsonl"
VALID_MESSAGE_ROLES = ("system", "user", "assistant")

# Log store
GENERATION_LOGS_TABLE = "generation_logs"
MISSING_TABLE_CODE = "42P01"

# Logging
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
