"""Shared constants: palettes, default prompt templates and request limits."""

from PIL import ImageColor

from spatial_annotator.models import DetectType

# Freehand drawing palette
STROKE_COLORS = [
    "rgb(0, 0, 0)",
    "rgb(255, 255, 255)",
    "rgb(213, 40, 40)",
    "rgb(250, 123, 23)",
    "rgb(240, 186, 17)",
    "rgb(8, 161, 72)",
    "rgb(26, 115, 232)",
    "rgb(161, 66, 244)",
]
DEFAULT_STROKE_COLOR = STROKE_COLORS[2]

# One color per mask instance, indexed by position in the sorted mask list
SEGMENTATION_COLORS = [
    "#E6194B",
    "#3C89D0",
    "#3CB44B",
    "#FFE119",
    "#911EB4",
    "#42D4F4",
    "#F58231",
    "#F032E6",
    "#BFEF45",
    "#469990",
]
SEGMENTATION_COLORS_RGB: list[tuple[int, int, int]] = [ImageColor.getrgb(c)[:3] for c in SEGMENTATION_COLORS]

# Label colors are derived from the label text
LABEL_COLOR_SATURATION = 80
LABEL_COLOR_LIGHTNESS = 50

# Overlay rendering
MASK_OPACITY = 0.5
BOX_OUTLINE_WIDTH = 2
POINT_RADIUS = 8
POINT_OUTLINE_WIDTH = 2

# Freehand strokes
DEFAULT_LINE_THICKNESS = 6
MIN_LINE_THICKNESS = 1
MAX_LINE_THICKNESS = 32
STROKE_PRESSURE = 0.5

# Model request
DEFAULT_TEMPERATURE = 0.4
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0
MAX_BOX_ITEMS = 20

DEFAULT_LABEL_LANGUAGE = "Français"
DEFAULT_LABEL_INSTRUCTION = "une étiquette de texte"
# Trailing clause of the default segmentation suffix, replaced when labels are requested in another language
DEFAULT_LABEL_CLAUSE = ' l\'étiquette de texte dans la clé "label". Utiliser des étiquettes descriptives.'

DEFAULT_PROMPT_PARTS: dict[DetectType, list[str]] = {
    DetectType.BOUNDING_BOXES_2D: [
        "Détecter",
        "les fissures, l'écaillage et les taches d'eau sur la surface en béton",
        "",
    ],
    DetectType.SEGMENTATION_MASKS: [
        "Donner les masques de segmentation pour",
        "toutes les zones de peinture écaillée sur les murs extérieurs",
        ". Sortir une liste JSON de masques de segmentation où chaque entrée contient la boîte englobante 2D "
        'dans la clé "box_2d", le masque de segmentation dans la clé "mask", et l\'étiquette de texte dans la clé '
        '"label". Utiliser des étiquettes descriptives.',
    ],
    DetectType.POINTS: [
        "Pointer vers les",
        "emplacements des briques manquantes sur la façade",
        ' avec un maximum de 10 éléments. La réponse doit suivre le format json : [{"point": <point>, '
        '"label": <label1>}, ...]. Les points sont au format [y, x] normalisé de 0 à 1000.',
    ],
}

DEFAULT_CUSTOM_PROMPTS: dict[DetectType, str] = {
    DetectType.BOUNDING_BOXES_2D: (
        "Détecter tous les défauts de construction visibles. Pour chaque défaut, fournir une boîte englobante 2D "
        "et une étiquette descriptive. Exemples de défauts : fissures, écaillage, dégâts des eaux, corrosion et "
        'installations incorrectes. Sortir une liste JSON où chaque entrée contient la boîte englobante 2D dans '
        '"box_2d" et une étiquette de texte dans "label".'
    ),
    DetectType.SEGMENTATION_MASKS: (
        "Segmenter toutes les zones présentant des défauts de surface. Cela inclut la peinture écaillée, la "
        "moisissure, le mildiou ou la décoloration généralisée. Sortir une liste JSON de masques de segmentation "
        'où chaque entrée contient la boîte englobante 2D dans la clé "box_2d", le masque de segmentation dans '
        'la clé "mask", et l\'étiquette de texte dans la clé "label". Utiliser des étiquettes descriptives.'
    ),
    DetectType.POINTS: (
        "Repérer les défauts spécifiques et localisés. Il peut s'agir de fixations manquantes, de tuyaux qui "
        'fuient ou de carreaux ébréchés. La réponse doit suivre le format json : [{"point": <point>, '
        '"label": <label1>}, ...]. Les points sont au format [y, x] normalisé de 0 à 1000.'
    ),
}

# Gemini safety settings applied to every request
SAFETY_THRESHOLD = "BLOCK_ONLY_HIGH"
SAFETY_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
    "HARM_CATEGORY_CIVIC_INTEGRITY",
]

EXAMPLE_IMAGE_FILENAMES = [
    "origami.jpg",
    "pumpkins.jpg",
    "clock.jpg",
    "socks.jpg",
    "breakfast.jpg",
    "cat.jpg",
    "spill.jpg",
    "fruit.jpg",
    "baklava.jpg",
]
GALLERY_INLINE_COUNT = 6

UPLOAD_TYPES = ["jpg", "jpeg", "png", "webp"]

# API timeouts
API_TIMEOUT_READ = 10.0

# Space available to the annotation canvas, in pixels
CANVAS_WIDTH = 960
CANVAS_HEIGHT = 640
