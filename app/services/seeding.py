"""Seed languages, Spanish lessons with exercises, and a demo user (only into an empty database)."""
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password
from app.models.enrollment import Enrollment
from app.models.language import Language
from app.models.lesson import Exercise, Lesson
from app.models.user import User

LANGUAGES = [
    ("Spanish", "es", "🇪🇸", "Learn Spanish - one of the most spoken languages in the world"),
    ("French", "fr", "🇫🇷", "Master French - the language of love and diplomacy"),
    ("German", "de", "🇩🇪", "Discover German - a key language in Europe and business"),
    ("Italian", "it", "🇮🇹", "Learn Italian - the language of art, music, and culture"),
    ("Portuguese", "pt", "🇵🇹", "Master Portuguese - spoken across multiple continents"),
]

# (title, description, difficulty, exercises); exercise = (type, question, answer, options, explanation, points)
SPANISH_LESSONS = [
    ("Basic Greetings", "Learn essential greetings and introductions in Spanish", "beginner", [
        ("multiple_choice", 'How do you say "Hello" in Spanish?', "Hola",
         ["Hola", "Adiós", "Gracias", "Por favor"],
         '"Hola" is the standard greeting in Spanish, equivalent to "Hello" in English.', 10),
        ("multiple_choice", 'What does "Buenos días" mean?', "Good morning",
         ["Good morning", "Good afternoon", "Good evening", "Good night"],
         '"Buenos días" literally means "good days" and is used to say "good morning".', 10),
        ("fill_blank", 'Complete: "¿Cómo te _____?" (What is your name?)', "llamas", None,
         '"¿Cómo te llamas?" literally means "How do you call yourself?"', 15),
        ("translation", 'Translate "Nice to meet you" to Spanish', "Mucho gusto", None,
         '"Mucho gusto" is the standard way to say "Nice to meet you" in Spanish.', 15),
    ]),
    ("Numbers 1-20", "Master counting from 1 to 20 in Spanish", "beginner", [
        ("multiple_choice", 'What is "cinco" in English?', "5", ["3", "4", "5", "6"],
         '"Cinco" is the Spanish word for the number 5.', 10),
        ("fill_blank", 'Complete: "diez" = _____', "10", None,
         '"Diez" is the Spanish word for the number 10.', 10),
        ("translation", 'Translate "fifteen" to Spanish', "quince", None,
         '"Quince" is the Spanish word for the number 15.', 15),
    ]),
    ("Colors", "Learn the names of colors in Spanish", "beginner", [
        ("multiple_choice", 'What color is "rojo"?', "Red", ["Blue", "Red", "Green", "Yellow"],
         '"Rojo" is the Spanish word for the color red.', 10),
        ("multiple_choice", 'How do you say "blue" in Spanish?', "azul",
         ["verde", "azul", "amarillo", "blanco"],
         '"Azul" is the Spanish word for the color blue.', 10),
    ]),
    ("Family Members", "Learn vocabulary for family relationships", "beginner", [
        ("multiple_choice", 'What does "madre" mean?', "Mother", ["Father", "Mother", "Sister", "Brother"],
         '"Madre" is the Spanish word for mother.', 10),
        ("translation", 'Translate "father" to Spanish', "padre", None,
         '"Padre" is the Spanish word for father.', 15),
    ]),
    ("Food and Drinks", "Essential vocabulary for ordering food and drinks", "intermediate", [
        ("multiple_choice", 'What does "agua" mean?', "Water", ["Milk", "Water", "Coffee", "Juice"],
         '"Agua" is the Spanish word for water.', 10),
        ("multiple_choice", 'How do you say "bread" in Spanish?', "pan", ["pan", "leche", "café", "queso"],
         '"Pan" is the Spanish word for bread.', 10),
    ]),
]

DEMO_EMAIL = "demo@linguaquest.app"
DEMO_USERNAME = "demo_user"
DEMO_PASSWORD = "demo1234"


async def seed_catalog(db: AsyncSession) -> bool:
    """Populate an empty database. Returns False when languages already exist."""
    existing = (await db.execute(select(func.count(Language.id)))).scalar_one()
    if existing:
        return False

    languages = [
        Language(name=name, code=code, flag=flag, description=description)
        for name, code, flag, description in LANGUAGES
    ]
    db.add_all(languages)
    await db.flush()
    spanish = languages[0]

    for order, (title, description, difficulty, exercises) in enumerate(SPANISH_LESSONS, start=1):
        lesson = Lesson(
            language_id=spanish.id,
            title=title,
            description=description,
            order=order,
            difficulty=difficulty,
        )
        db.add(lesson)
        await db.flush()
        db.add_all(
            Exercise(
                lesson_id=lesson.id,
                type=type_,
                question=question,
                correct_answer=answer,
                options=options,
                explanation=explanation,
                order=ex_order,
                points=points,
            )
            for ex_order, (type_, question, answer, options, explanation, points) in enumerate(exercises, start=1)
        )

    demo = User(
        email=DEMO_EMAIL,
        username=DEMO_USERNAME,
        hashed_password=hash_password(DEMO_PASSWORD),
        first_name="Demo",
        last_name="User",
    )
    db.add(demo)
    await db.flush()
    db.add(Enrollment(user_id=demo.id, language_id=spanish.id, level=1, is_active=True))

    await db.commit()
    logger.info(
        "Seeded {} languages, {} Spanish lessons and demo user {}",
        len(languages), len(SPANISH_LESSONS), DEMO_USERNAME,
    )
    return True
