"""Offline AI collaborators.

Fixed zones and a fixed press-on-nails copy pool: 9 headlines, 3 quotes and
8 angle-matched subtexts per language. Subtexts share their headline's angle
so a creative can pair them by tone.
"""
from __future__ import annotations

import logging

from ad_composer.models import (
    LANGUAGES,
    Angle,
    CopyPool,
    CopySlot,
    FamilyDefinition,
    ImageAsset,
    NormRect,
    SafeZones,
    SlotType,
    Zone,
)
from ad_composer.utils.ids import new_id

logger = logging.getLogger(__name__)

_ZONES = (
    Zone(id="A", rect=NormRect(x=0.04, y=0.03, w=0.5, h=0.15)),  # top-left
    Zone(id="B", rect=NormRect(x=0.04, y=0.78, w=0.92, h=0.19)),  # bottom
    Zone(id="C", rect=NormRect(x=0.6, y=0.05, w=0.36, h=0.25)),  # top-right
)

# Product centre
_AVOID_REGIONS = (NormRect(x=0.2, y=0.25, w=0.6, h=0.5),)

_HEADLINES: dict[str, list[tuple[Angle, str]]] = {
    "en": [
        (Angle.BENEFIT, "Salon look in 5 minutes"),
        (Angle.BENEFIT, "No glue, no mess, no stress"),
        (Angle.CURIOSITY, "What if nails lasted 2 weeks?"),
        (Angle.URGENCY, "Limited drop — grab yours"),
        (Angle.EMOTIONAL, "You deserve nails that turn heads"),
        (Angle.ASPIRATIONAL, "Effortlessly you."),
        (Angle.ASPIRATIONAL, "Crafted for the discerning few."),
        (Angle.STORY, "She stopped getting manicures. Here's why."),
        (Angle.CONTRAST, "Salon price. Home speed."),
    ],
    "de": [
        (Angle.BENEFIT, "Salon-Look in 5 Minuten"),
        (Angle.BENEFIT, "Kein Kleber, kein Chaos, kein Stress"),
        (Angle.CURIOSITY, "Was, wenn Nägel 2 Wochen halten?"),
        (Angle.URGENCY, "Limitierte Edition — jetzt sichern"),
        (Angle.EMOTIONAL, "Du verdienst Nägel, die Blicke fangen"),
        (Angle.ASPIRATIONAL, "Mühelose Eleganz."),
        (Angle.ASPIRATIONAL, "Für anspruchsvolle Geschmäcker."),
        (Angle.STORY, "Sie hörte auf, zum Nagelstudio zu gehen. Das ist der Grund."),
        (Angle.CONTRAST, "Salon-Qualität. Heimvorteil."),
    ],
    "fr": [
        (Angle.BENEFIT, "Look salon en 5 minutes"),
        (Angle.BENEFIT, "Sans colle, sans désordre, sans stress"),
        (Angle.CURIOSITY, "Et si vos ongles duraient 2 semaines ?"),
        (Angle.URGENCY, "Édition limitée — commandez vite"),
        (Angle.EMOTIONAL, "Vous méritez des ongles qui font tourner les têtes"),
        (Angle.ASPIRATIONAL, "L'élégance, naturellement."),
        (Angle.ASPIRATIONAL, "Pour celles qui savent."),
        (Angle.STORY, "Elle a arrêté les manucures. Voici pourquoi."),
        (Angle.CONTRAST, "Prix salon. Rapidité maison."),
    ],
    "es": [
        (Angle.BENEFIT, "Look de salón en 5 minutos"),
        (Angle.BENEFIT, "Sin pegamento, sin desorden, sin estrés"),
        (Angle.CURIOSITY, "¿Y si las uñas duraran 2 semanas?"),
        (Angle.URGENCY, "Edición limitada — consigue la tuya"),
        (Angle.EMOTIONAL, "Mereces uñas que roben miradas"),
        (Angle.ASPIRATIONAL, "Elegancia sin esfuerzo."),
        (Angle.ASPIRATIONAL, "Para las que lo saben."),
        (Angle.STORY, "Dejó de ir a la manicura. Esto es lo que pasó."),
        (Angle.CONTRAST, "Precio de salón. Velocidad en casa."),
    ],
}

_QUOTES: dict[str, list[tuple[str, str]]] = {
    "en": [
        (
            "I literally threw away my nail kit after using these. Zero chipping, zero hassle, zero regrets.",
            "— Emma R., Verified Buyer",
        ),
        (
            "My manicurist was shocked these aren't gel. Two weeks in and they still look perfect.",
            "— Sophie M., Verified Buyer",
        ),
        (
            "I've tried every press-on brand out there. Nothing comes close to this quality.",
            "— Jade L., Verified Buyer",
        ),
    ],
    "de": [
        (
            "Ich habe mein Nagelset weggeworfen, nachdem ich diese benutzt habe. Kein Absplittern, kein Aufwand, keine Reue.",
            "— Emma R., Verifizierte Käuferin",
        ),
        (
            "Meine Nageldesignerin war schockiert, dass das kein Gel ist. Zwei Wochen später sehen sie noch perfekt aus.",
            "— Sophie M., Verifizierte Käuferin",
        ),
        (
            "Ich habe jede Marke ausprobiert. Nichts kommt an diese Qualität heran.",
            "— Jade L., Verifizierte Käuferin",
        ),
    ],
    "fr": [
        (
            "J'ai littéralement jeté ma trousse à ongles. Zéro écaillage, zéro tracas, zéro regret.",
            "— Emma R., Acheteuse vérifiée",
        ),
        (
            "Ma manucure était choquée que ce ne soit pas du gel. Deux semaines plus tard, toujours parfait.",
            "— Sophie M., Acheteuse vérifiée",
        ),
        (
            "J'ai essayé toutes les marques. Rien n'égale cette qualité.",
            "— Jade L., Acheteuse vérifiée",
        ),
    ],
    "es": [
        (
            "Literalmente tiré mi kit de uñas después de usarlas. Sin astillas, sin complicaciones, sin arrepentimientos.",
            "— Emma R., Compradora verificada",
        ),
        (
            "Mi manicurista no podía creer que no fueran gel. Dos semanas después y siguen perfectas.",
            "— Sophie M., Compradora verificada",
        ),
        (
            "He probado todas las marcas. Nada se acerca a esta calidad.",
            "— Jade L., Compradora verificada",
        ),
    ],
}

_SUBTEXTS: dict[str, list[tuple[Angle, str]]] = {
    "en": [
        (Angle.BENEFIT, "Professional results at home"),
        (Angle.CURIOSITY, "See what you've been missing"),
        (Angle.URGENCY, "Limited time · Limited stock"),
        (Angle.EMOTIONAL, "Because you deserve the best"),
        (Angle.ASPIRATIONAL, "Luxury Collection"),
        (Angle.ASPIRATIONAL, "For the discerning few"),
        (Angle.STORY, "Her secret. Now yours."),
        (Angle.CONTRAST, "Salon quality. Home price."),
    ],
    "de": [
        (Angle.BENEFIT, "Professionelle Ergebnisse zu Hause"),
        (Angle.CURIOSITY, "Entdecke, was du verpasst hast"),
        (Angle.URGENCY, "Limitiert · Jetzt sichern"),
        (Angle.EMOTIONAL, "Weil du das Beste verdienst"),
        (Angle.ASPIRATIONAL, "Luxuskollektion"),
        (Angle.ASPIRATIONAL, "Für anspruchsvolle Geschmäcker"),
        (Angle.STORY, "Ihr Geheimnis. Jetzt deins."),
        (Angle.CONTRAST, "Salon-Qualität. Heimvorteil."),
    ],
    "fr": [
        (Angle.BENEFIT, "Résultats professionnels à domicile"),
        (Angle.CURIOSITY, "Découvrez ce que vous manquiez"),
        (Angle.URGENCY, "Limité · Commandez vite"),
        (Angle.EMOTIONAL, "Parce que vous méritez le meilleur"),
        (Angle.ASPIRATIONAL, "Collection Luxe"),
        (Angle.ASPIRATIONAL, "Pour celles qui savent"),
        (Angle.STORY, "Son secret. Maintenant le vôtre."),
        (Angle.CONTRAST, "Qualité salon. Prix maison."),
    ],
    "es": [
        (Angle.BENEFIT, "Resultados profesionales en casa"),
        (Angle.CURIOSITY, "Descubre lo que te has perdido"),
        (Angle.URGENCY, "Limitado · Consigue el tuyo"),
        (Angle.EMOTIONAL, "Porque mereces lo mejor"),
        (Angle.ASPIRATIONAL, "Colección de Lujo"),
        (Angle.ASPIRATIONAL, "Para las que lo saben"),
        (Angle.STORY, "Su secreto. Ahora el tuyo."),
        (Angle.CONTRAST, "Calidad salón. Precio de casa."),
    ],
}


class MockZoneAnalyzer:
    async def analyze(self, image: ImageAsset, image_bytes: bytes) -> SafeZones:
        logger.info("Mock zone analysis for image %s", image.id)
        return SafeZones(
            image_id=image.id,
            zones=list(_ZONES),
            avoid_regions=list(_AVOID_REGIONS),
        )


class MockCopyGenerator:
    def __init__(self, recommended_family: str = "promo"):
        self.recommended_family = recommended_family

    async def generate(self, image: ImageAsset, image_bytes: bytes) -> CopyPool:
        slots: list[CopySlot] = []
        for language in LANGUAGES:
            for angle, text in _HEADLINES[language]:
                slots.append(
                    CopySlot(
                        id=new_id("sl"),
                        language=language,
                        slot_type=SlotType.HEADLINE,
                        text=text,
                        angle=angle,
                    )
                )
            for text, attribution in _QUOTES[language]:
                slots.append(
                    CopySlot(
                        id=new_id("sl"),
                        language=language,
                        slot_type=SlotType.QUOTE,
                        text=text,
                        attribution=attribution,
                    )
                )
            for angle, text in _SUBTEXTS[language]:
                slots.append(
                    CopySlot(
                        id=new_id("sl"),
                        language=language,
                        slot_type=SlotType.SUBTEXT,
                        text=text,
                        angle=angle,
                    )
                )
        logger.info("Mock copy pool for image %s: %d slots", image.id, len(slots))
        return CopyPool(image_id=image.id, slots=slots)

    async def recommend_family(
        self,
        image: ImageAsset,
        image_bytes: bytes,
        families: list[FamilyDefinition],
    ) -> str:
        return self.recommended_family
