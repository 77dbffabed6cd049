"""Real-time transcription relay between browser clients and a streaming recognizer."""
