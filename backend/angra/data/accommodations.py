# angra/data/accommodations.py
from typing import Dict

LANGUAGES = ("pt", "en", "es", "fr")
DEFAULT_LANGUAGE = "pt"


def _t(pt: str, en: str, es: str, fr: str) -> Dict[str, str]:
    return {"pt": pt, "en": en, "es": es, "fr": fr}


_GARAGE = _t(
    "Garagem privativa com acesso direto",
    "Private garage with direct access",
    "Garaje privado con acceso directo",
    "Garage privé avec accès direct",
)
_SOFA_BED = _t(
    "Sofá-cama para acomodação extra",
    "Sofa bed for extra accommodation",
    "Sofá cama para alojamiento extra",
    "Canapé-lit pour hébergement supplémentaire",
)
_AC_TV_ALEXA = _t(
    "Ar-condicionado, TV e Alexa",
    "Air conditioning, TV and Alexa",
    "Aire acondicionado, TV y Alexa",
    "Climatisation, TV et Alexa",
)
_TWO_COMFORTABLE_BEDROOMS = _t(
    "2 quartos confortáveis",
    "2 comfortable bedrooms",
    "2 habitaciones confortables",
    "2 chambres confortables",
)

ACCOMMODATIONS = [
    {
        "id": "casa-101",
        "name": _t("Casa 101", "House 101", "Casa 101", "Maison 101"),
        "tagline": _t(
            "O Canto do Relaxamento",
            "The Relaxation Corner",
            "El Rincón del Relax",
            "Le Coin de la Détente",
        ),
        "description": _t(
            "Perfeita para quem quer descansar e se presentear com momentos únicos de conforto e tranquilidade.",
            "Perfect for those who want to rest and treat themselves to unique moments of comfort and tranquility.",
            "Perfecta para quienes desean descansar y regalarse momentos únicos de confort y tranquilidad.",
            "Parfaite pour ceux qui veulent se reposer et s'offrir des moments uniques de confort et de tranquillité.",
        ),
        "features": [
            _t(
                "Sala integrada com cozinha americana",
                "Integrated living room with American kitchen",
                "Sala integrada con cocina americana",
                "Salon intégré avec cuisine américaine",
            ),
            _t("2 quartos (1 suíte)", "2 bedrooms (1 suite)", "2 habitaciones (1 suite)", "2 chambres (1 suite)"),
            _t(
                "Varanda privativa com banheira de hidromassagem",
                "Private balcony with hot tub",
                "Balcón privado con jacuzzi",
                "Balcon privé avec jacuzzi",
            ),
            _SOFA_BED,
            _t(
                "Ar-condicionado em todos os quartos",
                "Air conditioning in all rooms",
                "Aire acondicionado en todas las habitaciones",
                "Climatisation dans toutes les chambres",
            ),
            _t("TV e Alexa integrados", "TV and Alexa integrated", "TV y Alexa integrados", "TV et Alexa intégrés"),
            _GARAGE,
        ],
        "ideal_for": _t(
            "Casais em lua-de-mel, pequenas famílias que buscam um toque de luxo.",
            "Couples on honeymoon, small families seeking a touch of luxury.",
            "Parejas en luna de miel, familias pequeñas que buscan un toque de lujo.",
            "Couples en lune de miel, petites familles recherchant une touche de luxe.",
        ),
        "highlight": _t("Banheira de Hidromassagem", "Hot Tub", "Jacuzzi", "Jacuzzi"),
        "images": [],
    },
    {
        "id": "casa-102",
        "name": _t("Casa 102", "House 102", "Casa 102", "Maison 102"),
        "tagline": _t(
            "Piscina Privativa para Curtir o Dia Todo",
            "Private Pool to Enjoy All Day",
            "Piscina Privada para Disfrutar Todo el Día",
            "Piscine Privée pour Profiter Toute la Journée",
        ),
        "description": _t(
            "Mesma planta elegante da Casa 101, com um diferencial irresistível: sua própria piscina privativa.",
            "Same elegant layout as House 101, with an irresistible feature: your own private pool.",
            "Misma planta elegante que la Casa 101, con un diferencial irresistible: su propia piscina privada.",
            "Même plan élégant que la Maison 101, avec un atout irrésistible : votre propre piscine privée.",
        ),
        "features": [
            _t(
                "Piscina redonda privativa com pontos de hidromassagem",
                "Private round pool with hydromassage jets",
                "Piscina redonda privada con puntos de hidromasaje",
                "Piscine ronde privée avec jets d'hydromassage",
            ),
            _t(
                "Sala + cozinha integradas",
                "Integrated living room + kitchen",
                "Sala + cocina integradas",
                "Salon + cuisine intégrés",
            ),
            _TWO_COMFORTABLE_BEDROOMS,
            _SOFA_BED,
            _AC_TV_ALEXA,
            _GARAGE,
        ],
        "ideal_for": _t(
            "Quem deseja privacidade e diversão sem sair da casa.",
            "Those who want privacy and fun without leaving home.",
            "Quienes desean privacidad y diversión sin salir de casa.",
            "Ceux qui veulent intimité et divertissement sans quitter la maison.",
        ),
        "highlight": _t("Piscina Privativa", "Private Pool", "Piscina Privada", "Piscine Privée"),
        "images": [],
    },
    {
        "id": "casa-201",
        "name": _t("Casa 201", "House 201", "Casa 201", "Maison 201"),
        "tagline": _t(
            "Tranquilidade no Piso Superior",
            "Tranquility on the Upper Floor",
            "Tranquilidad en el Piso Superior",
            "Tranquillité à l'Étage Supérieur",
        ),
        "description": _t(
            "Conforto e privacidade em um ambiente mais elevado, ideal para quem valoriza o sossego.",
            "Comfort and privacy in a higher setting, ideal for those who value peace.",
            "Confort y privacidad en un ambiente más elevado, ideal para quienes valoran la tranquilidad.",
            "Confort et intimité dans un cadre en hauteur, idéal pour ceux qui apprécient le calme.",
        ),
        "features": [
            _t(
                "Sala-cozinha americana integrada",
                "Integrated American kitchen-living room",
                "Sala-cocina americana integrada",
                "Salon-cuisine américaine intégré",
            ),
            _t("2 quartos espaçosos", "2 spacious bedrooms", "2 habitaciones espaciosas", "2 chambres spacieuses"),
            _t(
                "Sacada privativa com vista",
                "Private balcony with view",
                "Balcón privado con vista",
                "Balcon privé avec vue",
            ),
            _AC_TV_ALEXA,
            _GARAGE,
        ],
        "ideal_for": _t(
            "Quem busca sossego, trabalho remoto ou um ambiente mais tranquilo.",
            "Those seeking peace, remote work or a quieter environment.",
            "Quienes buscan tranquilidad, trabajo remoto o un ambiente más tranquilo.",
            "Ceux qui recherchent le calme, le télétravail ou un environnement plus paisible.",
        ),
        "highlight": None,
        "images": [],
    },
    {
        "id": "casa-202",
        "name": _t("Casa 202", "House 202", "Casa 202", "Maison 202"),
        "tagline": _t(
            "Conforto e Calmaria no Andar Superior",
            "Comfort and Calm on the Upper Floor",
            "Confort y Calma en el Piso Superior",
            "Confort et Sérénité à l'Étage Supérieur",
        ),
        "description": _t(
            "Mesma proposta elegante da Casa 201, oferecendo paz e privacidade para uma estadia inesquecível.",
            "Same elegant concept as House 201, offering peace and privacy for an unforgettable stay.",
            "Misma propuesta elegante que la Casa 201, ofreciendo paz y privacidad para una estadía inolvidable.",
            "Même concept élégant que la Maison 201, offrant paix et intimité pour un séjour inoubliable.",
        ),
        "features": [
            _t(
                "Sala integrada com cozinha",
                "Integrated living room with kitchen",
                "Sala integrada con cocina",
                "Salon intégré avec cuisine",
            ),
            _TWO_COMFORTABLE_BEDROOMS,
            _t("Sacada privativa", "Private balcony", "Balcón privado", "Balcon privé"),
            _AC_TV_ALEXA,
            _GARAGE,
        ],
        "ideal_for": _t(
            "Hóspedes que valorizam silêncio e privacidade.",
            "Guests who value silence and privacy.",
            "Huéspedes que valoran el silencio y la privacidad.",
            "Clients qui apprécient le silence et l'intimité.",
        ),
        "highlight": None,
        "images": [],
    },
]
