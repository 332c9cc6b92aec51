"""Sermons bundled with the site, served when the database has none."""

from __future__ import annotations

from datetime import date

from .model import Sermon

STATIC_SERMONS = (
    Sermon(
        id="a-videira-e-os-ramos",
        title_pt="A Videira e os Ramos",
        title_en="The Vine and the Branches",
        preacher="Pr. Lucas Almeida",
        date=date(2025, 3, 9),
        excerpt_pt="Permanecer em Cristo é a fonte de todo fruto verdadeiro.",
        excerpt_en="Remaining in Christ is the source of all true fruit.",
        content_pt=(
            "Jesus se apresenta como a videira verdadeira e nos chama a permanecer nele. "
            "Separados dele nada podemos fazer; unidos a ele damos muito fruto."
        ),
        content_en=(
            "Jesus presents himself as the true vine and calls us to remain in him. "
            "Apart from him we can do nothing; joined to him we bear much fruit."
        ),
        scripture="João 15:1-8",
        series="fe-e-crescimento",
        tags=("fé", "discipulado"),
    ),
    Sermon(
        id="fe-que-persevera",
        title_pt="Fé que Persevera",
        title_en="Faith that Perseveres",
        preacher="Pr. Lucas Almeida",
        date=date(2025, 2, 16),
        excerpt_pt="A fé amadurece quando atravessa as provações.",
        excerpt_en="Faith matures as it goes through trials.",
        content_pt=(
            "Tiago nos ensina a considerar motivo de alegria as provações, "
            "porque a prova da fé produz perseverança."
        ),
        content_en=(
            "James teaches us to consider trials a reason for joy, "
            "because the testing of faith produces perseverance."
        ),
        scripture="Tiago 1:2-4",
        series="fe-e-crescimento",
        tags=("fé",),
    ),
    Sermon(
        id="uma-casa-edificada-na-rocha",
        title_pt="Uma Casa Edificada na Rocha",
        title_en="A House Built on the Rock",
        preacher="Pra. Ana Souza",
        date=date(2024, 11, 10),
        excerpt_pt="Famílias firmes ouvem e praticam a Palavra.",
        excerpt_en="Strong families hear and practice the Word.",
        content_pt=(
            "A diferença entre as duas casas não estava na tempestade, mas no fundamento. "
            "Ouvir e praticar a Palavra edifica lares que permanecem."
        ),
        content_en=(
            "The difference between the two houses was not the storm but the foundation. "
            "Hearing and practicing the Word builds homes that stand."
        ),
        scripture="Mateus 7:24-27",
        series="familia-crista",
        tags=("família",),
    ),
    Sermon(
        id="o-amor-no-lar",
        title_pt="O Amor no Lar",
        title_en="Love at Home",
        preacher="Pra. Ana Souza",
        date=date(2024, 10, 6),
        excerpt_pt="O amor paciente e bondoso começa dentro de casa.",
        excerpt_en="Patient and kind love starts at home.",
        content_pt="Paulo descreve o amor que não busca os seus interesses. Esse amor transforma famílias.",
        content_en="Paul describes the love that does not seek its own. That love transforms families.",
        scripture="1 Coríntios 13:4-7",
        series="familia-crista",
        tags=("família", "amor"),
    ),
)


def sorted_static_sermons() -> list[Sermon]:
    return sorted(STATIC_SERMONS, key=lambda s: s.date, reverse=True)
