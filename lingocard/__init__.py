"""
LingoCard - Illustrated vocabulary lesson cards generated with Gemini.

Sub-packages:
- schemas: lesson, pipeline state and response payload models
- generation: Gemini client for lesson text, scene image, object positions and speech
- pipeline: state store and the multi-phase generation orchestrator
- viewer: label layout and lesson card HTML
- audio: PCM decoding and playback
"""

__version__ = "0.1.0"
