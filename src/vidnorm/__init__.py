"""Video normalizer: upload, re-encode with ffmpeg, download."""
