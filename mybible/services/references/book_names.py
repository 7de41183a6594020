# mybible/services/references/book_names.py
"""
Default book name table in MyBible numbering.

Keys are MyBible book numbers. Values list the full name first, then the
aliases accepted when parsing. The primary short name (used for display) is
the first alias. This table is what gets written to default_mapping.json
the first time the config directory is set up.
"""

DEFAULT_BOOK_NAMES = {
    # Torah/Pentateuch
    10: ["Genesis", "Gen", "Ge", "Gn"],
    20: ["Exodus", "Exod", "Ex", "Exo"],
    30: ["Leviticus", "Lev", "Le", "Lv"],
    40: ["Numbers", "Num", "Nu", "Nm"],
    50: ["Deuteronomy", "Deut", "Dt", "Deu"],

    # Historical Books
    60: ["Joshua", "Josh", "Jos"],
    70: ["Judges", "Judg", "Jdg", "Jg"],
    80: ["Ruth", "Ru", "Rth"],
    90: ["1 Samuel", "1Sam", "1 Sam", "1Sa", "I Samuel"],
    100: ["2 Samuel", "2Sam", "2 Sam", "2Sa", "II Samuel"],
    110: ["1 Kings", "1Kgs", "1 Kgs", "1Ki", "I Kings"],
    120: ["2 Kings", "2Kgs", "2 Kgs", "2Ki", "II Kings"],
    130: ["1 Chronicles", "1Chr", "1 Chr", "1Ch", "I Chronicles"],
    140: ["2 Chronicles", "2Chr", "2 Chr", "2Ch", "II Chronicles"],
    150: ["Ezra", "Ezr"],
    160: ["Nehemiah", "Neh", "Ne"],
    190: ["Esther", "Esth", "Est", "Es"],

    # Wisdom/Poetry
    220: ["Job", "Jb"],
    230: ["Psalms", "Ps", "Psalm", "Psa", "Pss"],
    240: ["Proverbs", "Prov", "Pr", "Prv"],
    250: ["Ecclesiastes", "Eccl", "Ecc", "Ec", "Qoh"],
    260: ["Song of Solomon", "Song", "Song of Songs", "SoS", "Cant"],

    # Major Prophets
    290: ["Isaiah", "Isa", "Is"],
    300: ["Jeremiah", "Jer", "Je"],
    310: ["Lamentations", "Lam", "La"],
    330: ["Ezekiel", "Ezek", "Eze", "Ez"],
    340: ["Daniel", "Dan", "Dn", "Da"],

    # Minor Prophets
    350: ["Hosea", "Hos", "Ho"],
    360: ["Joel", "Jl"],
    370: ["Amos", "Am"],
    380: ["Obadiah", "Obad", "Ob"],
    390: ["Jonah", "Jon", "Jnh"],
    400: ["Micah", "Mic", "Mi"],
    410: ["Nahum", "Nah", "Na"],
    420: ["Habakkuk", "Hab", "Hb"],
    430: ["Zephaniah", "Zeph", "Zep"],
    440: ["Haggai", "Hag", "Hg"],
    450: ["Zechariah", "Zech", "Zec"],
    460: ["Malachi", "Mal", "Ml"],

    # Gospels and Acts
    470: ["Matthew", "Matt", "Mt", "Mat"],
    480: ["Mark", "Mk", "Mr"],
    490: ["Luke", "Lk", "Lu"],
    500: ["John", "Jn", "Joh"],
    510: ["Acts", "Ac", "Act"],

    # General Epistles (MyBible places these before Paul)
    660: ["James", "Jas", "Jm"],
    670: ["1 Peter", "1Pet", "1 Pet", "1Pe", "I Peter"],
    680: ["2 Peter", "2Pet", "2 Pet", "2Pe", "II Peter"],
    690: ["1 John", "1Jn", "1 Jn", "1Jo", "I John"],
    700: ["2 John", "2Jn", "2 Jn", "2Jo", "II John"],
    710: ["3 John", "3Jn", "3 Jn", "3Jo", "III John"],
    720: ["Jude", "Jud", "Jd"],

    # Pauline Epistles
    520: ["Romans", "Rom", "Ro", "Rm"],
    530: ["1 Corinthians", "1Cor", "1 Cor", "1Co", "I Corinthians"],
    540: ["2 Corinthians", "2Cor", "2 Cor", "2Co", "II Corinthians"],
    550: ["Galatians", "Gal", "Ga"],
    560: ["Ephesians", "Eph", "Ep"],
    570: ["Philippians", "Phil", "Php"],
    580: ["Colossians", "Col"],
    590: ["1 Thessalonians", "1Thess", "1 Thess", "1Th", "I Thessalonians"],
    600: ["2 Thessalonians", "2Thess", "2 Thess", "2Th", "II Thessalonians"],
    610: ["1 Timothy", "1Tim", "1 Tim", "1Ti", "I Timothy"],
    620: ["2 Timothy", "2Tim", "2 Tim", "2Ti", "II Timothy"],
    630: ["Titus", "Tit"],
    640: ["Philemon", "Phlm", "Phm"],
    650: ["Hebrews", "Heb"],

    # Revelation
    730: ["Revelation", "Rev", "Re", "Rv", "Apocalypse"],
}
