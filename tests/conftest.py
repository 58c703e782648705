import pytest

HEADER = "Date,Tournament,Surface,Player_1,Player_2,Winner,y,Odd_1,Odd_2,Rank_1,Rank_2\n"

MATCHES = [
    "2022-03-01,Indian Wells,Hard,Swiatek I.,Sakkari M.,Swiatek I.,1,1.30,3.50,4,6",
    "2022-05-10,Rome,Clay,Jabeur O.,Swiatek I.,Swiatek I.,0,3.10,1.35,7,1",
    "2022-06-30,Wimbledon,Grass,Swiatek I.,Cornet A.,Cornet A.,0,1.10,7.00,1,37",
    "2023-01-15,Adelaide,Hard,Sabalenka A.,Noskova L.,Sabalenka A.,1,1.14,5.50,5,102",
    "2023-05-20,Rome,Clay,Rybakina E.,Kalinina A.,Rybakina E.,1,1.40,2.90,7,47",
    "2023-06-01,Roland Garros,Clay,Swiatek I.,Gauff C.,Swiatek I.,1,1.10,7.50,1,6",
    # no odds
    "2023-07-10,Wimbledon,Grass,Vondrousova M.,Svitolina E.,Vondrousova M.,1,,,42,76",
    # unparseable date, dropped by the loader
    "not a date,Nowhere,Hard,A B.,C D.,A B.,1,1.50,2.50,10,20",
]


@pytest.fixture
def match_csv(tmp_path):
    path = tmp_path / "wta_data.csv"
    path.write_text(HEADER + "\n".join(MATCHES) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def rows():
    """Canonical rows as the loader would produce them (subset of fields)."""
    return [
        {"date": "2023-01-02", "year": 2023, "surface": "Hard", "player_1": "A", "player_2": "B",
         "winner": "A", "y": 1, "odd_1": 1.5, "odd_2": 2.5},
        {"date": "2023-01-09", "year": 2023, "surface": "Clay", "player_1": "B", "player_2": "C",
         "winner": "C", "y": 0, "odd_1": 1.8, "odd_2": 2.0},
        {"date": "2023-02-01", "year": 2023, "surface": "Hard", "player_1": "C", "player_2": "A",
         "winner": "A", "y": 0, "odd_1": 2.2, "odd_2": 1.6},
        {"date": "2024-01-03", "year": 2024, "surface": "Clay", "player_1": "A", "player_2": "C",
         "winner": "A", "y": 1, "odd_1": 1.2, "odd_2": 4.0},
        {"date": "2024-01-05", "year": 2024, "surface": "Hard", "player_1": "B", "player_2": "A",
         "winner": "B", "y": None, "odd_1": None, "odd_2": 1.9},
    ]
