"""Read-only rule tables for prompt validation and enhancement.

Every table is built once at import time. Classification tables are ordered
tuples evaluated first-match-wins so priority stays explicit.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

CONFLICTING_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("photorealistic", "cartoon"),
    ("photorealistic", "anime"),
    ("photorealistic", "pixel art"),
    ("minimalist", "highly detailed"),
    ("monochrome", "vibrant colors"),
    ("bright", "dark moody"),
    ("2d flat", "3d render"),
    ("vector", "oil painting"),
)

VAGUE_TERMS: Tuple[str, ...] = (
    "nice",
    "good",
    "beautiful",
    "amazing",
    "cool",
    "awesome",
    "great",
    "best",
    "perfect",
    "fantastic",
    "wonderful",
)

# (breakdown field, pattern, suggestion when missing)
CATEGORY_CHECKS: Tuple[Tuple[str, re.Pattern, Optional[str]], ...] = (
    (
        "has_subject",
        re.compile(
            r"\b(person|figure|character|object|product|scene|landscape|portrait|animal|building|car|robot"
            r"|creature|woman|man|child|hero|villain|warrior|dragon|cat|dog)\b"
        ),
        "Add a clear subject (person, object, scene, etc.)",
    ),
    (
        "has_style",
        re.compile(
            r"\b(style|aesthetic|art|photography|painting|illustration|render|sketch|cartoon|anime|ghibli"
            r"|watercolor|pixel|vector|digital|oil|pencil|charcoal)\b"
        ),
        "Specify an art style (photograph, illustration, anime, etc.)",
    ),
    (
        "has_lighting",
        re.compile(
            r"\b(light|shadow|bright|dark|golden|ambient|rim|volumetric|neon|glow|backlit|sunset|sunrise"
            r"|overcast|studio|dramatic|soft|harsh|natural)\b"
        ),
        "Describe lighting (natural, studio, dramatic, golden hour, etc.)",
    ),
    (
        "has_composition",
        re.compile(
            r"\b(composition|frame|angle|perspective|centered|close-up|wide|macro|overhead|eye-level"
            r"|bird.?s eye|worm.?s eye|rule of thirds|symmetr|asymmetr)\b"
        ),
        "Add composition details (close-up, wide angle, centered, etc.)",
    ),
    (
        "has_quality",
        re.compile(r"\b(detailed|quality|resolution|4k|8k|hd|professional|masterpiece|ultra|crisp|sharp|precise)\b"),
        "Include quality modifiers (detailed, professional, 4K, etc.)",
    ),
    (
        "has_color",
        re.compile(
            r"\b(color|palette|vibrant|muted|warm|cool|monochrome|tone|hue|saturated|pastel|neon|earth tone"
            r"|complementary)\b"
        ),
        "Mention color palette (vibrant, muted, warm tones, etc.)",
    ),
    (
        "has_mood",
        re.compile(
            r"\b(mood|atmosphere|feeling|emotion|dramatic|serene|energetic|melancholy|joyful|mysterious|eerie"
            r"|peaceful|chaotic|tense|calm|epic|intimate)\b"
        ),
        None,
    ),
)

CATEGORY_WEIGHTS: Mapping[str, int] = MappingProxyType(
    {
        "has_subject": 15,
        "has_style": 15,
        "has_lighting": 12,
        "has_composition": 10,
        "has_quality": 8,
        "has_color": 8,
        "has_mood": 7,
    }
)

# (min score, label, tone), highest band first
SCORE_BANDS: Tuple[Tuple[int, str, str], ...] = (
    (85, "Excellent", "excellent"),
    (70, "Good", "good"),
    (50, "Fair", "fair"),
    (30, "Needs Work", "needs-work"),
)

IMAGE_TYPE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("photograph", ("photo", "photograph", "camera", "dslr", "lens", "portrait", "headshot", "candid")),
    ("illustration", ("illustration", "illustrate", "draw", "graphic", "editorial")),
    ("3d-render", ("3d", "render", "blender", "cgi", "unreal engine", "octane")),
    ("digital-art", ("digital art", "concept art", "digital painting", "artstation")),
    ("oil-painting", ("oil painting", "brush strokes", "canvas", "impressionist")),
    ("watercolor", ("watercolor", "watercolour", "wash", "wet media")),
    ("vector", ("vector", "flat design", "svg", "geometric")),
    ("pixel-art", ("pixel", "8-bit", "16-bit", "retro game")),
    ("sketch", ("sketch", "pencil", "charcoal", "line drawing", "hand-drawn")),
    ("anime", ("anime", "manga", "cel-shaded", "japanese animation")),
)

IMAGE_TYPE_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "photograph": "Photograph",
        "illustration": "Illustration",
        "3d-render": "3D Render",
        "digital-art": "Digital Art",
        "oil-painting": "Oil Painting",
        "watercolor": "Watercolor",
        "vector": "Vector",
        "pixel-art": "Pixel Art",
        "sketch": "Sketch",
        "anime": "Anime",
    }
)

CATEGORY_DEFAULT_IMAGE_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "ai-image": "digital-art",
        "action-figure": "photograph",
        "ghibli": "watercolor",
        "cartoon": "illustration",
        "meme": "digital-art",
        "video": "digital-art",
        "musicStar": "photograph",
        "retro": "photograph",
        "tvShow": "photograph",
        "wrestling": "photograph",
    }
)

COMPOSITION_RULES: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"portrait|face|headshot|person"), "portrait"),
    (re.compile(r"landscape|scenery|vista|nature|mountain|ocean"), "landscape"),
    (re.compile(r"product|packaging|toy|figure.*box|blister"), "product"),
    (re.compile(r"character|hero|villain|warrior"), "character"),
    (re.compile(r"abstract|pattern|texture|geometric"), "abstract"),
)
FALLBACK_COMPOSITION = "scene"

STYLE_DESCRIPTORS: Mapping[str, str] = MappingProxyType(
    {
        "photograph": "photorealistic, shot on Canon EOS R5, professional photography",
        "illustration": "detailed illustration, clean line work, professional editorial quality",
        "3d-render": "3D rendered, physically based rendering, detailed materials and textures",
        "digital-art": "digital painting, concept art quality, trending on ArtStation",
        "oil-painting": "oil on canvas, visible brush strokes, rich color depth",
        "watercolor": "watercolor on cold-pressed paper, soft washes, organic bleeding edges",
        "vector": "clean vector illustration, flat design, crisp edges, minimal gradients",
        "pixel-art": "pixel art, limited color palette, clean pixel placement, retro aesthetic",
        "sketch": "detailed pencil sketch, fine cross-hatching, tonal value range",
        "anime": "anime style, cel-shaded, vibrant colors, expressive character design",
    }
)

QUALITY_MODIFIERS: Mapping[str, str] = MappingProxyType(
    {
        "standard": "high quality, well-composed",
        "high": "highly detailed, professional quality, 4K resolution",
        "ultra": "masterpiece quality, ultra-detailed, 8K resolution, award-winning",
    }
)

LIGHTING_TEMPLATES: Mapping[str, str] = MappingProxyType(
    {
        "photograph": "natural golden hour lighting with soft fill",
        "illustration": "balanced lighting with clear value structure",
        "3d-render": "three-point studio lighting with ambient occlusion",
        "digital-art": "dramatic volumetric lighting with color grading",
        "oil-painting": "chiaroscuro lighting with warm color temperature",
        "watercolor": "soft diffused natural light",
        "vector": "flat lighting with subtle drop shadows",
        "pixel-art": "pixel-consistent lighting direction",
        "sketch": "single directional light source for clear shadows",
        "anime": "rim lighting with vibrant color highlights",
    }
)

COMPOSITION_GUIDANCE: Mapping[str, str] = MappingProxyType(
    {
        "portrait": "rule of thirds, eye-level camera angle, shallow depth of field",
        "landscape": "wide angle, leading lines, foreground interest, atmospheric perspective",
        "product": "centered composition, clean background, even lighting, slight angle",
        "scene": "dynamic composition, depth layers, visual focal point",
        "character": "full body framing, balanced pose, environmental context",
        "abstract": "asymmetric balance, color harmony, visual rhythm",
    }
)

CATEGORY_TO_SPEC_KEY: Mapping[str, str] = MappingProxyType(
    {
        "action-figure": "actionFigure",
        "ghibli": "ghibli",
        "cartoon": "cartoon",
        "meme": "meme",
        "musicStar": "musicStar",
        "retro": "retro",
        "tvShow": "tvShow",
        "wrestling": "wrestling",
    }
)


def _freeze(table):
    return MappingProxyType({key: MappingProxyType(dict(value)) for key, value in table.items()})


TECHNICAL_SPECS = _freeze(
    {
        "actionFigure": {
            "resolution": "8K resolution, high detail",
            "lighting": "studio lighting with soft fill, dramatic shadows",
            "camera": "professional product photography, shallow depth of field",
            "quality": "photorealistic materials and textures",
            "composition": "clean white background, centered composition",
        },
        "meme": {
            "resolution": "high contrast, readable typography",
            "lighting": "bright, viral social media aesthetic",
            "camera": "clean composition with text overlay",
            "quality": "bold typography, impact font, proper spacing",
            "composition": "meme format with top and bottom text areas",
        },
        "cartoon": {
            "resolution": "clean line art, consistent stroke width",
            "lighting": "vibrant cartoon colors, limited palette",
            "camera": "exaggerated features and expressions",
            "quality": "simplified anatomy, animated character design",
            "composition": "dynamic poses, clear focal points",
        },
        "ghibli": {
            "resolution": "soft watercolor painting technique",
            "lighting": "hand-drawn animation aesthetic, whimsical atmosphere",
            "camera": "detailed background elements, emotional expressions",
            "quality": "Studio Ghibli watercolor style, magical elements",
            "composition": "balanced composition with depth and atmosphere",
        },
        "musicStar": {
            "resolution": "professional concert photography",
            "lighting": "stage lighting with dramatic effects",
            "camera": "performance capture with motion and energy",
            "quality": "vibrant colors, dynamic expressions",
            "composition": "entertainment focus with personality emphasis",
        },
        "retro": {
            "resolution": "nostalgic aesthetic with period-appropriate detail",
            "lighting": "era-specific lighting and atmosphere",
            "camera": "classic photography style for the time period",
            "quality": "authentic materials and period styling",
            "composition": "iconic poses and settings from the era",
        },
        "tvShow": {
            "resolution": "professional production quality",
            "lighting": "studio and location lighting appropriate to genre",
            "camera": "character-focused composition with emotional depth",
            "quality": "authentic costuming and production design",
            "composition": "dramatic framing with character emphasis",
        },
        "wrestling": {
            "resolution": "high-energy action photography",
            "lighting": "arena lighting with dramatic spotlights",
            "camera": "dynamic action capture with motion blur",
            "quality": "authentic wrestling gear and expressions",
            "composition": "powerful poses with arena atmosphere",
        },
    }
)

CATEGORY_ENHANCEMENTS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "actionFigure": (
            "highly detailed articulation points",
            "realistic plastic textures and materials",
            "professional toy packaging design",
            "commercial product photography standards",
            "studio lighting with product shadows",
        ),
        "meme": (
            "high contrast text for readability",
            "meme format with top and bottom text areas",
            "exaggerated facial expressions and reactions",
            "bold typography and impact font",
            "viral social media aesthetic",
        ),
        "cartoon": (
            "clean line art with consistent stroke width",
            "vibrant color palette appropriate for style",
            "exaggerated features and expressions",
            "simplified anatomy and proportions",
            "animated character design principles",
        ),
        "ghibli": (
            "soft, painterly animation look",
            "natural lighting with magical elements",
            "peaceful landscape and character harmony",
            "oversized eyes with emotional depth",
            "dreamy fantasy atmosphere",
        ),
        "musicStar": (
            "stage presence and performance energy",
            "musical instrument integration",
            "crowd interaction and showmanship",
            "vibrant performance lighting",
            "entertainment industry professionalism",
        ),
        "retro": (
            "period-appropriate technology and styling",
            "nostalgic color palettes and materials",
            "era-specific cultural references",
            "classic design elements and motifs",
            "authentic retro atmosphere",
        ),
        "tvShow": (
            "character-driven emotional storytelling",
            "production design authenticity",
            "genre-specific visual language",
            "professional acting and expression",
            "narrative composition and framing",
        ),
        "wrestling": (
            "high-intensity athletic performance",
            "arena atmosphere and crowd energy",
            "dramatic lighting and special effects",
            "authentic wrestling gear and accessories",
            "powerful physical presence and poses",
        ),
    }
)

UNIVERSAL_NEGATIVES: Tuple[str, ...] = (
    "blurry",
    "low quality",
    "distorted",
    "deformed",
    "watermark",
    "signature",
    "ugly",
    "poorly drawn",
    "bad anatomy",
    "disfigured",
    "out of frame",
)

# Keyed by image type or generator category.
SPECIFIC_NEGATIVES: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "photograph": ("cartoon", "illustration", "painting", "drawing", "anime", "cgi"),
        "illustration": ("photorealistic", "photograph", "blurry", "3d render"),
        "3d-render": ("flat", "2d", "hand-drawn", "sketch", "watercolor"),
        "cartoon": ("photorealistic", "photograph", "hyper-realistic", "3d render"),
        "anime": ("western cartoon", "photorealistic", "oil painting"),
        "action-figure": ("broken plastic", "damaged packaging", "poor sculpt", "missing limbs"),
        "meme": ("small text", "unreadable text", "low contrast", "blurry background"),
    }
)

EXPECTED_STYLE_LABELS: Mapping[str, str] = MappingProxyType({"ghibli": "Studio Ghibli", "cartoon": "cartoon"})
DEFAULT_STYLE_LABEL = "professional"

GENERIC_SUGGESTIONS: Tuple[str, ...] = (
    "Add specific lighting conditions",
    "Include camera angle specifications",
    "Specify art style or aesthetic",
    "Add environmental details",
    "Include mood or atmosphere descriptions",
)

BUILDER_QUALITY_PHRASES: Mapping[str, str] = MappingProxyType(
    {
        "low": "basic quality",
        "medium": "good quality",
        "high": "high quality",
        "ultra": "ultra high quality",
        "maximum": "maximum quality, ultra detailed",
    }
)
