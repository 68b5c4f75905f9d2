"""Core segmentation, estimation, rendering, and session modules.

WHY: The core package is the whole read-along engine: it turns page text
into sentences and playback time into a highlighted position. It is a pure
computation library with no I/O, network, or UI dependencies.

HOW: ir.py defines the data model, segmenter.py splits text into
sentences and words, estimator.py maps playback progress to a position and
a sentence progress, highlight.py tags words for display, ticker.py drives
test mode, session.py coordinates everything per page, and pagination.py
splits books into pages and narration chunks.

RULES:
- Every function here is total: malformed input has a defined fallback
- Word counting and rendering share one tokenizer (segmenter.tokenize)
- The session is the only stateful component
"""
