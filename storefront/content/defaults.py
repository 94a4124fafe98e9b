"""Shipped site copy; every stored override is merged onto this document."""

from __future__ import annotations

from typing import Any

DEFAULT_SITE_CONTENT: dict[str, Any] = {
    "brand": "ProMonitor",
    "tagline": (
        "Bærbare skjermer og skjermutvidelser som gir deg full arbeidsflate, "
        "uansett hvor du jobber."
    ),
    "hero": {
        "eyebrow": "Skjermutvidelse til laptop",
        "title": "Gjør laptopen til en full arbeidsstasjon.",
        "description": (
            "Klikk på en ekstra skjerm og få mer plass til møter, analyser og "
            "kreativt arbeid. ProMonitor er laget for deg som jobber raskt og vil ha orden."
        ),
        "price_note": "Fra 4 490,-",
        "image": "https://promonitor.no/cdn/shop/files/20251116_234349.jpg?v=1763333926&width=2000",
        "meta": [
            "Fri frakt over 4 490,-",
            "30 dagers åpent kjøp",
            "Norsk kundeservice",
        ],
        "primary_cta": {"label": "Se produktene", "href": "/products"},
        "secondary_cta": {"label": "Finn riktig oppsett", "href": "#specs"},
    },
    "home": {
        "collections": {
            "eyebrow": "Oppsett",
            "title": "Velg oppsettet som passer arbeidsstilen din",
            "subtitle": "Fra ett ekstra panel til full quad-oppsett - skreddersy arbeidsflaten din.",
        },
        "featured": {
            "eyebrow": "Utvalgte produkter",
            "title": "Bestselgere fra ProMonitor",
            "subtitle": "Skjermer og tilbehør valgt for en mobil arbeidsflyt.",
        },
        "flow": {
            "eyebrow": "Slik fungerer det",
            "title": "Slik får du mer arbeidsflate på minutter",
            "subtitle": "Fire enkle steg til ferdig oppsett.",
        },
        "specs": {
            "eyebrow": "Spesifikasjoner",
            "title": "Bygget for fokus og flyt",
            "subtitle": "Mer plass, mindre friksjon - uansett hvor du jobber.",
            "items": [
                {
                    "value": "Opp til 3 skjermer",
                    "label": "Skjermutvidelse",
                    "detail": "Skaler fra ett ekstra panel til full quad-oppsett.",
                },
                {
                    "value": "Plug-and-play",
                    "label": "USB-C eller HDMI",
                    "detail": "Koble til og jobb - uten drivere eller ekstra oppsett.",
                },
                {
                    "value": "Klar for reise",
                    "label": "Lett og slankt design",
                    "detail": "Foldes flatt og får plass i vesken.",
                },
                {
                    "value": "Mac + Windows",
                    "label": "Universell kompatibilitet",
                    "detail": "Fungerer med de fleste bærbare PC-er og Mac.",
                },
            ],
        },
        "benefits": {
            "eyebrow": "Fordeler",
            "title": "Trygg handel fra start til levering",
            "subtitle": "Fri frakt, 30 dagers åpent kjøp og personlig support.",
        },
        "cta": {
            "eyebrow": "Kundeservice",
            "title": "Trenger du hjelp til riktig skjermoppsett?",
            "subtitle": "Vi svarer raskt og hjelper deg med kompatibilitet og montering.",
            "primary_cta": {"label": "Se produkter", "href": "/products"},
            "secondary_cta": {"label": "Kontakt oss", "href": "#support"},
        },
    },
    "shop": {
        "header": {
            "eyebrow": "Tilbud",
            "title": "Bygg arbeidsflaten du trenger",
            "subtitle": "Velg skjermutvidelser som gir deg ro, flyt og bedre oversikt.",
        },
        "cta": {
            "eyebrow": "Rask hjelp",
            "title": "Usikker på hva som passer?",
            "subtitle": "Vi hjelper deg å velge riktig oppsett basert på laptop, behov og budsjett.",
            "primary_cta": {"label": "Se kolleksjoner", "href": "/collections"},
            "secondary_cta": {"label": "Kontakt oss", "href": "#support"},
        },
        "collections": {
            "eyebrow": "Kolleksjoner",
            "title": "Finn riktig oppsett",
            "subtitle": "Velg mellom dobbelt-, trippel- og quad-oppsett.",
        },
        "featured": {
            "eyebrow": "Utvalgte produkter",
            "title": "Bestselgere akkurat nå",
            "subtitle": "Utvalgt for deg som jobber mobilt og vil ha orden på skjermene.",
        },
    },
    "collections_page": {
        "header": {
            "eyebrow": "Kolleksjoner",
            "title": "Skjermoppsett for ulike behov",
            "subtitle": "Velg oppsettet som gir deg riktig arbeidsflyt.",
        },
        "cta": {
            "eyebrow": "Behov",
            "title": "Trenger du hjelp til valg?",
            "subtitle": "Vi hjelper deg med kompatibilitet, montering og riktig skjermstørrelse.",
            "primary_cta": {"label": "Gå til tilbud", "href": "/shop"},
            "secondary_cta": {"label": "Kontakt oss", "href": "#support"},
        },
    },
    "collection_detail": {
        "cta": {
            "eyebrow": "Neste steg",
            "title": "Vil du se hele utvalget?",
            "subtitle": "Sammenlign alle modeller og finn riktig kombinasjon.",
            "primary_cta": {"label": "Se alle produkter", "href": "/products"},
            "secondary_cta": {"label": "Tilbake til kolleksjoner", "href": "/collections"},
        },
    },
    "products_page": {
        "header": {
            "eyebrow": "Produkter",
            "title": "Hele sortimentet",
            "subtitle": "Skjermutvidelser og tilbehør som gir mer arbeidsflate på sekunder.",
        },
    },
    "product_detail": {
        "eyebrow": "ProMonitor",
        "notice": "Fri frakt over 4 490,-, 30 dagers åpent kjøp og norsk kundeservice.",
    },
    "timeline": [
        {
            "title": "Velg skjerm og feste",
            "description": "Velg antall skjermer og feste som passer laptopen din.",
            "detail": "Vi anbefaler riktig størrelse og kompatibilitet basert på behov.",
        },
        {
            "title": "Monter på sekunder",
            "description": "Fest med magnet eller stativ og koble til via USB-C eller HDMI.",
            "detail": "Ingen verktøy - klikk på plass og start umiddelbart.",
        },
        {
            "title": "Optimaliser arbeidsflyten",
            "description": "Flytt verktøy, dokumenter og møter ut på ekstra skjermer.",
            "detail": "Hold fokus på hovedoppgaven mens alt annet er synlig ved siden av.",
        },
        {
            "title": "Pakk sammen og dra videre",
            "description": "Alt foldes flatt og er klart for neste arbeidssted.",
            "detail": "Et kompakt oppsett som er lett å ta med mellom hjem og kontor.",
        },
    ],
    "benefits": [
        {"title": "Fri frakt", "description": "Rask levering fra norsk lager på utvalgte modeller."},
        {"title": "30 dagers åpent kjøp", "description": "Test skjermoppsettet hjemme og på kontoret."},
        {"title": "2 års garanti", "description": "Trygg handel med garanti på alle skjermer og tilbehør."},
        {"title": "Personlig support", "description": "Vi hjelper deg med kompatibilitet og oppsett."},
    ],
    "collections": [
        {
            "title": "1 ekstra skjerm - dobbeltoppsett",
            "subtitle": "Dobbeltoppsett",
            "handle": "dual-monitor",
            "pitch": "Et ekstra panel som dobler arbeidsflaten uten oppsettstress.",
            "lead": "Perfekt for e-post, rapporter og møter side om side - stabilt og enkelt.",
        },
        {
            "title": "2 ekstra skjermer - trippeloppsett",
            "subtitle": "Trippeloppsett",
            "handle": "triple-monitor",
            "pitch": "To ekstra skjermer for full oversikt og effektiv flyt.",
            "lead": "Gi plass til analyser, design og prosjektstyring med maksimal oversikt.",
        },
        {
            "title": "3 ekstra skjermer - quad-oppsett",
            "subtitle": "Quad-oppsett",
            "handle": "quad-monitor",
            "pitch": "Tre ekstra skjermer for maksimal kontroll og arbeidsro.",
            "lead": "For deg som trenger stor arbeidsflate og vil slippe vinduskaos.",
        },
        {
            "title": "Bærbar skjerm",
            "subtitle": "Bærbare skjermer",
            "handle": "portable-monitorer",
            "pitch": "Ta med deg ekstra skjerm uansett hvor du jobber.",
            "lead": "Lett, slank og klar for reise. Perfekt til hjemmekontor og kundemøter.",
        },
    ],
}
