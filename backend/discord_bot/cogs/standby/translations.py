"""Translations of "One more" used for the almost-full notification."""

import random

ONE_MORE_TRANSLATIONS: list[tuple[str, str]] = [
    ("One more", "English"),
    ("Uno más", "Spanish"),
    ("Un de plus", "French"),
    ("Noch einer", "German"),
    ("Еще один", "Russian"),
    ("Ancora uno", "Italian"),
    ("Mais um", "Portuguese"),
    ("Jeszcze jeden", "Polish"),
    ("Încă unul", "Romanian"),
    ("Ще один", "Ukrainian"),
    ("Ještě jeden", "Czech"),
    ("Ένας ακόμα", "Greek"),
    ("Een meer", "Dutch"),
    ("En till", "Swedish"),
    ("En til", "Norwegian"),
    ("Én mere", "Danish"),
    ("Yksi lisää", "Finnish"),
    ("Még egy", "Hungarian"),
    ("Eitt til", "Icelandic"),
    ("یکی دیگر", "Persian"),
    ("एक और", "Hindi"),
    ("আরও একটি", "Bengali"),
    ("இன்னும் ஒன்று", "Tamil"),
    ("再来一个", "Chinese Simplified"),
    ("再來一個", "Chinese Traditional"),
    ("もう一つ", "Japanese"),
    ("하나 더", "Korean"),
    ("עוד אחד", "Hebrew"),
    ("واحد آخر", "Arabic"),
    ("Bir tane daha", "Turkish"),
    ("Moja zaidi", "Swahili"),
    ("Ọkan sii", "Yoruba"),
    ("Isa pa", "Tagalog/Filipino"),
    ("Satu lagi", "Indonesian/Malay"),
    ("Kotahi anō", "Maori"),
    ("Hoʻokahi hou", "Hawaiian"),
    ("Unu pli", "Esperanto"),
    ("Thêm một", "Vietnamese"),
    ("อีกหนึ่ง", "Thai"),
    ("Дахиад нэг", "Mongolian"),
    ("Un arall", "Welsh"),
    ("Aon eile", "Irish"),
    ("Edhe një", "Albanian"),
    ("კიდევ ერთი", "Georgian"),
    ("Bat gehiago", "Basque"),
    ("Wieħed ieħor", "Maltese"),
    ("Nog een", "Afrikaans"),
    ("Wan moa", "Jamaican Patois"),
]


def random_one_more(rng: random.Random | None = None) -> tuple[str, str]:
    """Return (translation, language name)."""
    return (rng or random).choice(ONE_MORE_TRANSLATIONS)
