"""All magic values live here; no inline literals anywhere else."""

# Backends
BACKEND_LOCAL = "local"
BACKEND_OPENAI = "openai"
DEFAULT_BACKEND = BACKEND_LOCAL

# Models
DEFAULT_LOCAL_MODEL = "openai/whisper-tiny.en"
DEFAULT_OPENAI_MODEL = "whisper-1"
ASR_TASK = "automatic-speech-recognition"

# Only these files are fetched for a local model; the rest of the repo
# (TF/Flax weights, ONNX exports) is never needed by the pipeline.
LOCAL_MODEL_FILE_PATTERNS = ("*.json", "*.safetensors", "*.txt")

# Language hint
DEFAULT_LANGUAGE = "english"
LANGUAGE_CODES = {
    "english": "en",
    "spanish": "es",
    "french": "fr",
    "german": "de",
    "chinese": "zh",
    "japanese": "ja",
}

# Inference options sent with every call
CHUNK_LENGTH_S = 30
STRIDE_LENGTH_S = 5
OPTION_CHUNK_LENGTH = "chunk_length_s"
OPTION_STRIDE_LENGTH = "stride_length_s"
OPTION_LANGUAGE = "language"
RESULT_TEXT_KEY = "text"

# Audio
SAMPLE_RATE = 16000
AUDIO_FILENAME = "audio.wav"

# Model switch policy
SWITCH_DEFER = "defer"
SWITCH_IMMEDIATE = "immediate"

# Log messages
MSG_STARTING = "Starting local-whisper…"
MSG_LOADING_MODEL = "Loading Whisper model %s… This may take a moment on first use."
MSG_MODEL_LOADED = "Whisper model %s loaded"
MSG_MODEL_LOAD_FAILED = "Failed to load Whisper model %s: %s"
MSG_LOAD_IN_FLIGHT = "Load of %s already in progress, attaching"
MSG_LOAD_SUPERSEDED = "Discarding result of superseded load for %s"
MSG_MODEL_SWITCH_DEFERRED = "Model switch to %s deferred until load of %s settles"
MSG_MODEL_SWITCHED = "Model set to %s"
MSG_STATE_CHANGED = "Model state: %s → %s (%d%%)"
MSG_PROGRESS = "Download progress %d%% (%s)"
MSG_DISPOSED = "Transcription model disposed"
MSG_SUBSCRIBER_FAILED = "Progress subscriber %r raised"
MSG_TRANSCRIBING = "Transcribing %d samples"
MSG_TRANSCRIPTION_DONE = "Transcription complete (%.1fs)"

# Error messages
MSG_ERR_EMPTY_INPUT = "Audio buffer is empty"
MSG_ERR_NOT_READY = "Transcriber not initialized"
MSG_ERR_INVALID_RESULT = "Invalid transcription result"

# User-facing replies
MSG_NO_SPEECH = "No speech detected in recording"
MSG_TRANSCRIPTION_FAILED = "Transcription failed. Check the log for details."
MSG_LOAD_FAILED = "Failed to load Whisper model. Check the log for details."
MSG_UNREADABLE_AUDIO = "Could not read audio file %s (expected raw float32 samples)"

# Status line, one per model state
STATUS_NOT_LOADED = "🔴 Model not loaded (click to load)"
STATUS_DOWNLOADING = "⏳ Downloading whisper model... %d%%"
STATUS_READY = "✓ Ready to transcribe"
STATUS_ERROR = "❌ Error loading model (click to retry)"
