"""Static simulation configuration constants."""

from __future__ import annotations

from .models import HealthSession, LifeEvent, StatDelta

STORAGE_KEY = "basketball-life-save-v1"
SAVE_VERSION = 2
DATA_DIR_ENV = "HOOPS_LIFE_DATA_DIR"

PRESEASON_WEEKS = 2
REGULAR_SEASON_WEEKS = 9
REGULAR_GAMES_PER_WEEK = 10
OFFSEASON_GAMES_PER_WEEK = 3
PLAYOFF_CUTOFF = 16
SEASON_LOOP_SAFETY_CAP = 100

# key -> (full name, conference, base strength)
NBA_TEAMS: dict[str, tuple[str, str, int]] = {
    "Lakers": ("Los Angeles Lakers", "West", 85),
    "Warriors": ("Golden State Warriors", "West", 88),
    "Celtics": ("Boston Celtics", "East", 90),
    "Heat": ("Miami Heat", "East", 82),
    "Nets": ("Brooklyn Nets", "East", 75),
    "Knicks": ("New York Knicks", "East", 83),
    "Bulls": ("Chicago Bulls", "East", 77),
    "76ers": ("Philadelphia 76ers", "East", 84),
    "Nuggets": ("Denver Nuggets", "West", 92),
    "Clippers": ("LA Clippers", "West", 81),
    "Suns": ("Phoenix Suns", "West", 86),
    "Mavericks": ("Dallas Mavericks", "West", 87),
    "Rockets": ("Houston Rockets", "West", 72),
    "Spurs": ("San Antonio Spurs", "West", 70),
    "Jazz": ("Utah Jazz", "West", 74),
    "Trail Blazers": ("Portland Trail Blazers", "West", 68),
    "Kings": ("Sacramento Kings", "West", 76),
    "Thunder": ("Oklahoma City Thunder", "West", 89),
    "Timberwolves": ("Minnesota Timberwolves", "West", 85),
    "Pelicans": ("New Orleans Pelicans", "West", 73),
    "Grizzlies": ("Memphis Grizzlies", "West", 78),
    "Hawks": ("Atlanta Hawks", "East", 79),
    "Hornets": ("Charlotte Hornets", "East", 71),
    "Magic": ("Orlando Magic", "East", 80),
    "Pistons": ("Detroit Pistons", "East", 66),
    "Pacers": ("Indiana Pacers", "East", 81),
    "Cavaliers": ("Cleveland Cavaliers", "East", 84),
    "Raptors": ("Toronto Raptors", "East", 75),
    "Wizards": ("Washington Wizards", "East", 69),
    "Bucks": ("Milwaukee Bucks", "East", 86),
}
TEAM_KEYS: tuple[str, ...] = tuple(NBA_TEAMS)

ARENAS = ("Fieldhouse", "Coliseum", "Garden", "Forum", "Center", "Pavilion", "Dome")
POSITIONS = ("PG", "SG", "SF", "PF", "C")

ARCHETYPES: dict[str, dict[str, int]] = {
    "Scorer": {"shooting": 78, "finishing": 70, "playmaking": 62, "defense": 58, "rebounding": 52,
               "stamina": 65, "dunking": 68, "passing": 60, "leadership": 55},
    "Playmaker": {"shooting": 68, "finishing": 66, "playmaking": 80, "defense": 60, "rebounding": 50,
                  "stamina": 70, "dunking": 55, "passing": 85, "leadership": 75},
    "TwoWay": {"shooting": 70, "finishing": 68, "playmaking": 60, "defense": 78, "rebounding": 62,
               "stamina": 72, "dunking": 65, "passing": 65, "leadership": 68},
    "Stretch": {"shooting": 80, "finishing": 60, "playmaking": 58, "defense": 60, "rebounding": 72,
                "stamina": 60, "dunking": 50, "passing": 62, "leadership": 58},
    "Slasher": {"shooting": 62, "finishing": 82, "playmaking": 66, "defense": 62, "rebounding": 56,
                "stamina": 75, "dunking": 80, "passing": 68, "leadership": 60},
    "Big": {"shooting": 58, "finishing": 76, "playmaking": 54, "defense": 72, "rebounding": 82,
            "stamina": 68, "dunking": 78, "passing": 52, "leadership": 65},
}

# name, min overall, base value ($k), annual scandal risk
ENDORSEMENTS: tuple[tuple[str, int, int, float], ...] = (
    ("HyperBounce Shoes", 70, 200, 0.05),
    ("Swish Soda", 65, 120, 0.08),
    ("DefendPro Gear", 68, 150, 0.06),
    ("StreamHoops", 75, 260, 0.04),
    ("RimRock Energy", 72, 180, 0.07),
)

# name, min overall, min followers, base value ($k), annual scandal risk
SHOE_BRANDS: tuple[tuple[str, int, int, int, float], ...] = (
    ("AirJordan", 75, 100_000, 400, 0.03),
    ("Nike", 70, 50_000, 350, 0.04),
    ("Adidas", 68, 40_000, 280, 0.05),
    ("Puma", 65, 30_000, 220, 0.06),
    ("Under Armour", 62, 20_000, 180, 0.07),
    ("NewBalance", 60, 15_000, 150, 0.08),
)

# name -> (cost $k, duration weeks, one-time effect)
PREMIUM_SERVICES: dict[str, tuple[int, int, StatDelta]] = {
    "Private Chef": (50, 4, StatDelta(health=15, peak=5)),
    "Personal Trainer": (80, 6, StatDelta(
        peak=10, ratings={"shooting": 2, "finishing": 2, "playmaking": 2, "defense": 2, "rebounding": 2},
    )),
    "Mental Coach": (60, 5, StatDelta(morale=20, ratings={"leadership": 3})),
    "Recovery Specialist": (70, 4, StatDelta(health=25, peak=15)),
    "Media Training": (40, 3, StatDelta(followers=10_000)),
}

# session -> (cost $k, health, peak, morale)
HEALTH_SESSIONS: dict[HealthSession, tuple[int, int, int, int]] = {
    HealthSession.DIET: (15, 8, 3, 0),
    HealthSession.GYM: (25, 12, 5, 2),
    HealthSession.CRYOTHERAPY: (80, 20, 15, 3),
}

INJURY_TYPES = ("ankle sprain", "knee soreness", "back stiffness", "shoulder strain", "hamstring tightness")

LIFE_EVENTS: tuple[LifeEvent, ...] = (
    LifeEvent("Local fans start a chant with your name.", StatDelta(morale=5, fame=3, followers=2000)),
    LifeEvent("You volunteer at a youth clinic.", StatDelta(morale=6, fame=2, followers=1500)),
    LifeEvent("Minor ankle sprain in practice.", StatDelta(health=-6, peak=-8)),
    LifeEvent("Viral trickshot video boosts your profile.", StatDelta(fame=5, followers=8000)),
    LifeEvent("Locker room disagreement.", StatDelta(morale=-5, team_chem=-4)),
    LifeEvent("Meditation retreat weekend.", StatDelta(peak=10, morale=4)),
    LifeEvent("Random drug test (you pass).", StatDelta(morale=-1)),
    LifeEvent("You adopt a rescue dog named Bouncy.", StatDelta(morale=7, followers=3000)),
    LifeEvent("Featured on magazine cover.", StatDelta(fame=8, followers=12_000, cash=25)),
    LifeEvent("Charity event raises $50k for local schools.", StatDelta(morale=8, fame=6, followers=5000)),
    LifeEvent("Controversial social media post backfires.", StatDelta(fame=-3, followers=-8000, morale=-3)),
    LifeEvent("You discover a new pregame ritual.", StatDelta(peak=5, morale=3)),
    LifeEvent("Invited to exclusive basketball camp.", StatDelta(ratings={"dunking": 1, "leadership": 1})),
    LifeEvent("Food poisoning from team dinner.", StatDelta(health=-10, peak=-15)),
    LifeEvent("Win slam dunk contest at local event.", StatDelta(fame=4, followers=6000, ratings={"dunking": 2})),
    LifeEvent("Your workout video goes viral on social media.", StatDelta(fame=6, followers=15_000, peak=3)),
    LifeEvent("Challenged by fan to 3-point contest - you win!",
              StatDelta(fame=3, followers=4000, ratings={"shooting": 0.5})),
    LifeEvent("Your motivational post gets 1M likes.", StatDelta(fame=4, followers=10_000, morale=5)),
    LifeEvent("Trash talk from rival player motivates you.", StatDelta(morale=8, peak=5)),
    LifeEvent("You start a podcast about basketball.", StatDelta(fame=7, followers=8000, cash=15)),
    LifeEvent("Bet with teammate on free throw shooting - you lose.", StatDelta(morale=-2, cash=-5)),
    LifeEvent("Late night gaming session affects your energy.", StatDelta(peak=-8, morale=2)),
    LifeEvent("You mentor a young player from your hometown.",
              StatDelta(morale=6, fame=2, ratings={"leadership": 1})),
    LifeEvent("Equipment malfunction during practice.", StatDelta(peak=-3, morale=-2)),
    LifeEvent("Your signature move gets its own nickname.", StatDelta(fame=5, followers=7000, morale=4)),
)

SOCIAL_MEDIA_POSTS: tuple[LifeEvent, ...] = (
    LifeEvent("Grinding in the gym! #NoOffSeason", StatDelta(followers=2000, fame=1)),
    LifeEvent("Blessed to play the game I love every day", StatDelta(followers=1500, morale=2)),
    LifeEvent("Shoutout to my teammates - we're building something special!",
              StatDelta(followers=3000, team_chem=2)),
    LifeEvent("Just dropped 30! But the W is all that matters", StatDelta(followers=4000, fame=2)),
    LifeEvent("Tough loss tonight but we'll be back stronger", StatDelta(followers=1000, morale=1)),
    LifeEvent("Can't wait to see our fans at the next home game!", StatDelta(followers=2500, fame=1)),
    LifeEvent("New shoes just dropped! Link in bio", StatDelta(followers=5000, cash=10)),
    LifeEvent("Studying film late into the night #Preparation",
              StatDelta(followers=1800, ratings={"playmaking": 0.3})),
)

# name, legacy score, titles, MVPs, career PPG, career PER
ALL_TIME_GREATS: tuple[tuple[str, int, int, int, float, float], ...] = (
    ("Michael Jordan", 950, 6, 5, 30.1, 27.9),
    ("LeBron James", 920, 4, 4, 27.2, 27.5),
    ("Kareem Abdul-Jabbar", 890, 6, 6, 24.6, 25.2),
    ("Magic Johnson", 860, 5, 3, 19.5, 24.1),
    ("Larry Bird", 840, 3, 3, 24.3, 23.5),
    ("Tim Duncan", 820, 5, 2, 19.0, 21.3),
    ("Shaquille O'Neal", 800, 4, 1, 23.7, 26.4),
    ("Kobe Bryant", 780, 5, 1, 25.0, 22.9),
    ("Hakeem Olajuwon", 760, 2, 1, 21.8, 23.6),
    ("Bill Russell", 740, 11, 5, 15.1, 18.9),
    ("Wilt Chamberlain", 720, 2, 4, 30.1, 26.1),
    ("Stephen Curry", 700, 4, 2, 24.6, 23.8),
)

# name, team, PPG, RPG, APG, PER, TS%
CURRENT_LEAGUE_LEADERS: tuple[tuple[str, str, float, float, float, float, float], ...] = (
    ("Luka Doncic", "Mavericks", 31.2, 8.9, 9.1, 29.8, 0.583),
    ("Jayson Tatum", "Celtics", 28.5, 8.2, 4.8, 27.1, 0.571),
    ("Nikola Jokic", "Nuggets", 26.8, 12.4, 8.9, 31.2, 0.632),
    ("Giannis Antetokounmpo", "Bucks", 29.1, 11.2, 6.1, 30.5, 0.598),
    ("Joel Embiid", "76ers", 27.9, 10.8, 3.2, 28.9, 0.588),
    ("Shai Gilgeous-Alexander", "Thunder", 30.1, 5.5, 6.2, 28.2, 0.618),
    ("Donovan Mitchell", "Cavaliers", 27.5, 4.4, 6.0, 24.8, 0.572),
    ("Anthony Davis", "Lakers", 24.7, 12.6, 3.5, 27.4, 0.589),
    ("De'Aaron Fox", "Kings", 26.6, 4.6, 6.1, 25.1, 0.551),
    ("Paolo Banchero", "Magic", 22.6, 6.9, 5.4, 21.9, 0.544),
)
