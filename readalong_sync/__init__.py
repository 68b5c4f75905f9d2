"""Read-along sync — sentence segmentation and audio-position highlighting.

WHY: A foreign-language reader plays narration audio while highlighting
the sentence and word being read. The narration comes from an external
text-to-speech service without word timestamps, so the highlight has to be
estimated from the elapsed playback time and the language's speaking rate.

HOW: Three stages — segment (page text → sentences), estimate (playback
progress → active sentence and word), render (position → tagged words).
A SyncSession coordinates them per page and publishes one read model per
tick; formatters turn that read model into JSON, HTML, or plain text.

RULES:
- The engine is open-loop: estimated positions may drift from the audio
- Every core function is total; malformed input never raises
- The read model is the stable contract with the presentation layer
"""

__version__ = "0.1.0"
