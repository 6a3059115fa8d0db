import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers import manifest as manifest_router
from app.routers import player as player_router
from app.services.manifest import Manifest

VIDEO_CANVAS = "https://example.org/canvas/0"
AUDIO_CANVAS = "https://example.org/canvas/1"
SILENT_CANVAS = "https://example.org/canvas/2"


def painting(body):
    return [{"type": "AnnotationPage", "items": [
        {"type": "Annotation", "motivation": "painting", "body": body},
    ]}]


def video(label, name, **extra):
    return {"id": f"https://example.org/media/{name}.mp4", "type": "Video",
            "label": {"en": [label]}, **extra}


def leaf(label, target):
    return {"type": "Range", "label": {"en": [label]},
            "items": [{"type": "Canvas", "id": target}]}


def make_manifest_data():
    return {
        "id": "https://example.org/manifest",
        "type": "Manifest",
        "label": {"en": ["Lecture recordings"]},
        "items": [
            {
                "id": VIDEO_CANVAS,
                "type": "Canvas",
                "width": 640,
                "height": 480,
                "duration": 600,
                "items": painting({"type": "Choice", "choiceHint": "user", "items": [
                    video("Low", "low", width=320, height=240),
                    video("Medium", "medium"),
                    video("Medium", "medium-copy"),
                    video("High", "high", width=1280, height=720),
                ]}),
                "annotations": [{"type": "AnnotationPage", "items": [
                    {"motivation": "supplementing", "body": {
                        "id": "https://example.org/captions/en.vtt", "type": "Text",
                        "format": "text/vtt", "language": "en"}},
                    {"motivation": "supplementing", "body": {
                        "id": "https://example.org/captions/fr.vtt", "type": "Text",
                        "format": "text/vtt", "language": "fr"}},
                ]}],
            },
            {
                "id": AUDIO_CANVAS,
                "type": "Canvas",
                "duration": 120,
                "items": painting({"id": "https://example.org/media/talk.mp3",
                                   "type": "Sound", "label": "Medium"}),
            },
            {
                "id": SILENT_CANVAS,
                "type": "Canvas",
                "items": [],
            },
        ],
        "structures": [
            {
                "type": "Range",
                "label": {"en": ["Part 1"]},
                "items": [
                    leaf("Introduction", f"{VIDEO_CANVAS}#t=10,30"),
                    leaf("Chapter 1", f"{VIDEO_CANVAS}#t=30.5,60"),
                ],
            },
            leaf("Part 2", f"{AUDIO_CANVAS}#t=0,120"),
            {
                "type": "Range",
                "label": "Broken",
                "items": [leaf("Missing", "https://example.org/canvas/99#t=0,5")],
            },
        ],
    }


@pytest.fixture
def manifest_data():
    return make_manifest_data()


@pytest.fixture
def manifest(manifest_data):
    return Manifest(manifest_data)


@pytest.fixture
def client(manifest):
    app.dependency_overrides[manifest_router.get_manifest] = lambda: manifest
    player_router._controller = None
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    player_router._controller = None
