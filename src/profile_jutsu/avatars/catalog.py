"""Known character images used before falling back to the character-search API."""

CHARACTER_IMAGES: dict[str, str] = {
    # Naruto
    "Naruto": "https://cdn.myanimelist.net/images/characters/2/284121.jpg",
    "Naruto Uzumaki": "https://cdn.myanimelist.net/images/characters/2/284121.jpg",
    "Sasuke Uchiha": "https://cdn.myanimelist.net/images/characters/9/131317.jpg",
    "Kakashi Hatake": "https://cdn.myanimelist.net/images/characters/7/284129.jpg",
    "Sakura Haruno": "https://cdn.myanimelist.net/images/characters/9/69275.jpg",
    "Itachi Uchiha": "https://cdn.myanimelist.net/images/characters/9/284122.jpg",
    "Shikamaru Nara": "https://cdn.myanimelist.net/images/characters/7/69276.jpg",
    "Hinata Hyuga": "https://cdn.myanimelist.net/images/characters/11/69277.jpg",
    "Gaara": "https://cdn.myanimelist.net/images/characters/15/72554.jpg",
    "Jiraiya": "https://cdn.myanimelist.net/images/characters/16/72556.jpg",
    "Minato Namikaze": "https://cdn.myanimelist.net/images/characters/5/72553.jpg",
    # Demon Slayer
    "Tanjiro Kamado": "https://cdn.myanimelist.net/images/characters/6/386735.jpg",
    "Nezuko Kamado": "https://cdn.myanimelist.net/images/characters/2/378254.jpg",
    "Zenitsu Agatsuma": "https://cdn.myanimelist.net/images/characters/10/459689.jpg",
    "Inosuke Hashibira": "https://cdn.myanimelist.net/images/characters/3/459690.jpg",
    "Giyu Tomioka": "https://cdn.myanimelist.net/images/characters/4/382246.jpg",
    "Kyojuro Rengoku": "https://cdn.myanimelist.net/images/characters/13/412432.jpg",
    "Shinobu Kocho": "https://cdn.myanimelist.net/images/characters/8/403413.jpg",
}

SERIES_DEFAULT_IMAGES: dict[str, str] = {
    "Naruto": CHARACTER_IMAGES["Naruto Uzumaki"],
    "Demon Slayer": CHARACTER_IMAGES["Tanjiro Kamado"],
}

GLOBAL_DEFAULT_IMAGE = "https://github.githubassets.com/images/modules/logos_page/Octocat.png"
