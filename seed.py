"""
Reset the movie collection to the demo catalog.

Usage:
    CONNECTION_URI=mongodb://localhost:27017/yusmov python seed.py
"""
import sys

from pymongo.database import Database
from pymongo.errors import PyMongoError

from config import Settings
from database import MOVIE_COLLECTION, connect, get_database, ping, stamp
from logger import configure_logging, logger
from schemas import Movie

DEMO_MOVIES = [
    {
        "title": "The Crow",
        "description": "A man brutally murdered comes back to life as an undead avenger of his fiancée's death.",
        "imageUrl": "https://m.media-amazon.com/images/I/81YFfHuh-PL._AC_SY679_.jpg",
        "genre": {"name": "Gothic Superhero", "description": "Dark, tragic, and gothic revenge themes."},
        "director": {"name": "Alex Proyas"},
    },
    {
        "title": "Beetlejuice",
        "description": "A recently deceased couple hire a sleazy ghost to help haunt their former home.",
        "imageUrl": "https://m.media-amazon.com/images/I/71R1K9Uu1oL._AC_SY679_.jpg",
        "genre": {"name": "Dark Comedy", "description": "Gothic humor with Tim Burton flair."},
        "director": {"name": "Tim Burton"},
    },
    {
        "title": "Interview with the Vampire",
        "description": "A journalist interviews a vampire who tells the story of his immortal life.",
        "imageUrl": "https://m.media-amazon.com/images/I/71t4GZ9J+fL._AC_SY679_.jpg",
        "genre": {"name": "Horror", "description": "Romantic, gothic vampire storytelling."},
        "director": {"name": "Neil Jordan"},
    },
    {
        "title": "Edward Scissorhands",
        "description": "An artificial man with scissors for hands lives in isolation until love draws him out.",
        "imageUrl": "https://m.media-amazon.com/images/I/71DjSl4Xn6L._AC_SY679_.jpg",
        "genre": {"name": "Romantic Fantasy", "description": "Tragic and gothic suburban fairytale."},
        "director": {"name": "Tim Burton"},
    },
    {
        "title": "Nosferatu",
        "description": "The classic 1922 silent film about Count Orlok, a vampire who preys on the living.",
        "imageUrl": "https://m.media-amazon.com/images/I/71+E0e0JbrL._AC_SY679_.jpg",
        "genre": {"name": "Horror", "description": "Silent-era gothic horror."},
        "director": {"name": "F.W. Murnau"},
    },
    {
        "title": "Dracula (1931)",
        "description": "Bela Lugosi stars in this iconic portrayal of Count Dracula.",
        "imageUrl": "https://m.media-amazon.com/images/I/71h7V8c5oDL._AC_SY679_.jpg",
        "genre": {"name": "Horror", "description": "Classic Universal gothic horror."},
        "director": {"name": "Tod Browning"},
    },
    {
        "title": "Crimson Peak",
        "description": "A young woman marries into a mysterious family and discovers terrifying secrets.",
        "imageUrl": "https://m.media-amazon.com/images/I/81i5Fdbzj1L._AC_SY679_.jpg",
        "genre": {"name": "Gothic Romance", "description": "Haunted house gothic by Guillermo del Toro."},
        "director": {"name": "Guillermo del Toro"},
    },
    {
        "title": "Sleepy Hollow",
        "description": "Ichabod Crane investigates murders linked to the Headless Horseman.",
        "imageUrl": "https://m.media-amazon.com/images/I/81FxHj6fHYL._AC_SY679_.jpg",
        "genre": {"name": "Horror Mystery", "description": "Tim Burton's gothic reimagining of the classic tale."},
        "director": {"name": "Tim Burton"},
    },
    {
        "title": "The Addams Family",
        "description": "The quirky, macabre Addams family faces off against a con artist.",
        "imageUrl": "https://m.media-amazon.com/images/I/71EwQ6tFb0L._AC_SY679_.jpg",
        "genre": {"name": "Dark Comedy", "description": "Gothic humor with iconic characters."},
        "director": {"name": "Barry Sonnenfeld"},
    },
    {
        "title": "Only Lovers Left Alive",
        "description": "Two sophisticated vampires reunite in Detroit, exploring love and ennui.",
        "imageUrl": "https://m.media-amazon.com/images/I/81gY8dPSNML._AC_SY679_.jpg",
        "genre": {"name": "Romantic Horror", "description": "Indie gothic exploration of immortality."},
        "director": {"name": "Jim Jarmusch"},
    },
]


def seed_movies(db: Database) -> int:
    """Delete every movie, then insert DEMO_MOVIES. Returns the inserted count."""
    collection = db[MOVIE_COLLECTION]
    deleted = collection.delete_many({}).deleted_count
    logger.info(f"removed {deleted} existing movies")
    docs = [stamp(Movie(**movie)) for movie in DEMO_MOVIES]
    result = collection.insert_many(docs)
    return len(result.inserted_ids)


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    client = connect(settings)
    try:
        ping(client)
    except PyMongoError as exc:
        logger.error(f"MongoDB connection error: {exc}")
        sys.exit(1)

    try:
        inserted = seed_movies(get_database(client, settings))
        logger.info(f"database seeded with {inserted} movies")
    except PyMongoError as exc:
        logger.error(f"error seeding database: {exc}")
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
