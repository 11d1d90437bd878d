"""
Lesson card renderer - Generate HTML for the illustrated vocabulary card.

Features:
- Scene image with vocabulary labels laid over it
- Placeholder when no image was produced (text-only lesson)
- Sentence list with translations
- Loading captions per pipeline phase
"""

from typing import Optional
import html

from lingocard.schemas import LessonContent, LoadingPhase, Sentence, Vocabulary

from .layout import LabelPosition, compute_label_positions


LOADING_CAPTIONS = {
    LoadingPhase.GENERATING_TEXT: "Planning lesson...",
    LoadingPhase.DRAWING_IMAGE: "Illustrating scene...",
    LoadingPhase.LOCATING_OBJECTS: "Creating labels...",
}

IMAGE_UNAVAILABLE_TEXT = "Image generation unavailable"


def get_card_css() -> str:
    """Get CSS styles for the lesson card."""
    return """
    <style>
    .lesson-card {
        background: white;
        border: 5px solid #1c1917;
        border-radius: 2.5rem;
        overflow: hidden;
        box-shadow: 0 25px 50px -12px rgba(0,0,0,0.25);
    }
    .card-header {
        background: #FFD966;
        border-bottom: 5px solid #1c1917;
        padding: 1em 1.5em;
    }
    .card-title {
        font-size: 2.4em;
        font-weight: 900;
        text-transform: uppercase;
        color: #1c1917;
        margin: 0;
    }
    .card-scene {
        position: relative;
        background: #fafaf9;
        min-height: 420px;
    }
    .card-scene img {
        width: 100%;
        display: block;
    }
    .card-placeholder {
        text-align: center;
        padding: 8em 2em;
        color: #a8a29e;
        font-size: 1.3em;
        font-weight: 700;
    }
    .card-label {
        position: absolute;
        transform: translate(-50%, -50%);
        display: flex;
        flex-direction: column;
        align-items: center;
        z-index: 10;
    }
    .card-label-box {
        background: white;
        border: 2.5px solid #1c1917;
        border-radius: 12px;
        padding: 4px 12px;
        box-shadow: 4px 4px 0 0 rgba(0,0,0,1);
        text-align: center;
        min-width: 100px;
    }
    .card-label-word {
        font-size: 1.1em;
        font-weight: 900;
        color: #1c1917;
    }
    .card-label-phonetic {
        font-size: 0.65em;
        font-family: monospace;
        color: #78716c;
    }
    .card-label-translation {
        font-weight: 700;
        color: #292524;
    }
    .card-label-pointer {
        width: 0;
        height: 0;
        border-left: 6px solid transparent;
        border-right: 6px solid transparent;
        border-top: 8px solid #1c1917;
        margin-top: -2px;
    }
    .card-sentences {
        padding: 1em 1.5em;
        border-top: 5px solid #1c1917;
    }
    .card-sentence {
        margin: 0.6em 0;
    }
    .card-sentence-translation {
        color: #78716c;
        font-size: 0.95em;
    }
    </style>
    """


def get_loading_caption(phase: Optional[LoadingPhase]) -> str:
    """Caption shown while a phase is running."""
    return LOADING_CAPTIONS.get(phase, "Thinking...")


def render_label(vocab: Vocabulary, position: LabelPosition, show_pointer: bool = False) -> str:
    """Render one vocabulary label at its position."""
    pointer = '<div class="card-label-pointer"></div>' if show_pointer else ''
    return (
        f'<div class="card-label" style="left:{position.x:g}%;top:{position.y:g}%;">'
        f'<div class="card-label-box">'
        f'<div class="card-label-word">{html.escape(vocab.word)}</div>'
        f'<div class="card-label-phonetic">/{html.escape(vocab.phonetic)}/</div>'
        f'<div class="card-label-translation">{html.escape(vocab.translation)}</div>'
        f'</div>{pointer}</div>'
    )


def render_labels(vocabulary: list[Vocabulary], has_image: bool) -> str:
    """
    Render all labels.

    Pointers are drawn only when there is an image to point at and the
    label sits on a detected object.
    """
    parts = []
    for vocab, position in zip(vocabulary, compute_label_positions(vocabulary)):
        parts.append(render_label(vocab, position, show_pointer=has_image and position.detected))
    return ''.join(parts)


def render_scene(content: LessonContent, image_data_uri: Optional[str]) -> str:
    """Render the image (or placeholder) with labels on top."""
    if image_data_uri:
        scene = f'<img src="{html.escape(image_data_uri, quote=True)}" alt="{html.escape(content.topic, quote=True)}">'
    else:
        scene = f'<div class="card-placeholder">{IMAGE_UNAVAILABLE_TEXT}</div>'

    labels = render_labels(content.vocabulary, has_image=bool(image_data_uri))
    return f'<div class="card-scene">{scene}{labels}</div>'


def render_sentence(sentence: Sentence) -> str:
    return (
        f'<div class="card-sentence">'
        f'<div>{html.escape(sentence.english)}</div>'
        f'<div class="card-sentence-translation">{html.escape(sentence.chinese)}</div>'
        f'</div>'
    )


def render_sentences(sentences: list[Sentence]) -> str:
    if not sentences:
        return ""
    return f'<div class="card-sentences">{"".join(render_sentence(s) for s in sentences)}</div>'


def render_lesson_card(content: LessonContent, image_data_uri: Optional[str] = None) -> str:
    """
    Render the complete lesson card as HTML.

    Args:
        content: Generated lesson
        image_data_uri: Scene image as a data URI, or None for text-only

    Returns:
        HTML string including the card CSS
    """
    parts = [get_card_css(), '<div class="lesson-card">']
    parts.append(f'<div class="card-header"><h1 class="card-title">{html.escape(content.topic)}</h1></div>')
    parts.append(render_scene(content, image_data_uri))
    parts.append(render_sentences(content.sentences))
    parts.append('</div>')
    return ''.join(parts)
