"""Seed the database with a small catalogue of roles, roadmaps, topics and questions.

Creates three roles, three roadmaps, three topics for the junior frontend
roadmap, three approved questions and two topic/question links.

Usage:
  cd backend
  python scripts/seed_db.py            # create tables if needed, then seed
  python scripts/seed_db.py --reset    # wipe catalogue tables first
"""

import argparse
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Allow `python scripts/seed_db.py` without setting PYTHONPATH
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from sqlalchemy import delete, func, select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from techprep.core.cache import cache_service  # noqa: E402
from techprep.core.database import AsyncSessionLocal, close_db, init_db  # noqa: E402
from techprep.core.logging import configure_logging, get_logger  # noqa: E402
from techprep.models import (  # noqa: E402
    Difficulty,
    InterviewQuestion,
    Level,
    MockInterview,
    Question,
    QuestionType,
    Roadmap,
    Role,
    Topic,
    TopicQuestion,
)

logger = get_logger("seed_db")

ROLES = [
    {
        "name": "Frontend Developer",
        "description": "Specializes in user interface and user experience development",
        "technologies": ["JavaScript", "TypeScript", "React", "Vue.js", "Angular", "CSS", "HTML"],
    },
    {
        "name": "Backend Developer",
        "description": "Focuses on server-side logic, databases, and API development",
        "technologies": ["Node.js", "Python", "Java", "Go", "PostgreSQL", "MongoDB", "Redis"],
    },
    {
        "name": "Full Stack Developer",
        "description": "Works on both frontend and backend development",
        "technologies": ["JavaScript", "TypeScript", "React", "Node.js", "PostgreSQL", "MongoDB"],
    },
]

# (role name, roadmap fields)
ROADMAPS = [
    (
        "Frontend Developer",
        {
            "level": Level.JUNIOR,
            "title": "Junior Frontend Developer Learning Path",
            "description": "Essential skills and knowledge for junior frontend developers",
            "estimated_hours": 120,
            "prerequisites": ["Basic HTML/CSS", "JavaScript fundamentals"],
        },
    ),
    (
        "Frontend Developer",
        {
            "level": Level.SENIOR,
            "title": "Senior Frontend Developer Learning Path",
            "description": "Advanced frontend development concepts and leadership skills",
            "estimated_hours": 200,
            "prerequisites": ["3+ years frontend experience", "React/Vue expertise", "State management"],
        },
    ),
    (
        "Backend Developer",
        {
            "level": Level.SENIOR,
            "title": "Senior Backend Developer Learning Path",
            "description": "Advanced backend architecture and system design",
            "estimated_hours": 180,
            "prerequisites": ["5+ years backend experience", "Database design", "API development"],
        },
    ),
]

JUNIOR_FRONTEND_TOPICS = [
    {
        "title": "JavaScript Fundamentals",
        "description": "Core JavaScript concepts including variables, functions, and async programming",
        "order": 1,
        "resources": [
            {
                "title": "MDN JavaScript Guide",
                "url": "https://developer.mozilla.org/en-US/docs/Web/JavaScript/Guide",
                "type": "documentation",
            },
            {"title": "JavaScript.info", "url": "https://javascript.info/", "type": "tutorial"},
        ],
    },
    {
        "title": "React Basics",
        "description": "Introduction to React components, JSX, and state management",
        "order": 2,
        "resources": [
            {"title": "React Official Tutorial", "url": "https://react.dev/learn", "type": "tutorial"},
            {"title": "React Hooks Guide", "url": "https://react.dev/reference/react", "type": "documentation"},
        ],
    },
    {
        "title": "CSS and Styling",
        "description": "Modern CSS techniques, Flexbox, Grid, and responsive design",
        "order": 3,
        "resources": [
            {
                "title": "CSS Grid Guide",
                "url": "https://css-tricks.com/snippets/css/complete-guide-grid/",
                "type": "article",
            },
            {
                "title": "Flexbox Guide",
                "url": "https://css-tricks.com/snippets/css/a-guide-to-flexbox/",
                "type": "article",
            },
        ],
    },
]

DEBOUNCE_CODE = """function debounce(func, wait) {
  let timeout;
  return function executedFunction(...args) {
    const later = () => {
      clearTimeout(timeout);
      func(...args);
    };
    clearTimeout(timeout);
    timeout = setTimeout(later, wait);
  };
}"""

VIRTUAL_DOM_CODE = """// Virtual DOM representation
const virtualElement = {
  type: 'div',
  props: {
    className: 'container',
    children: [{ type: 'h1', props: { children: 'Hello World' } }]
  }
};"""

BASE62_CODE = '''def generate_short_url(counter):
    chars = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
    result = ""
    while counter > 0:
        result = chars[counter % 62] + result
        counter //= 62
    return result or "0"'''

QUESTIONS = [
    {
        "title": "Implement a debounce function",
        "content": (
            "Write a function that limits the rate at which a function can fire. The function should "
            "delay invoking func until after wait milliseconds have elapsed since the last time the "
            "debounced function was invoked."
        ),
        "type": QuestionType.CODING,
        "difficulty": Difficulty.MEDIUM,
        "technologies": ["JavaScript", "TypeScript"],
        "roles": ["Frontend Developer", "Full Stack Developer"],
        "companies": ["Google", "Facebook", "Amazon"],
        "tags": ["functions", "closures", "timing"],
        "solution": {
            "explanation": (
                "A debounce function delays the execution of a function until a certain amount of "
                "time has passed since it was last called."
            ),
            "codeExamples": [
                {
                    "language": "javascript",
                    "code": DEBOUNCE_CODE,
                    "explanation": "Basic debounce implementation using setTimeout",
                }
            ],
            "timeComplexity": "O(1)",
            "spaceComplexity": "O(1)",
            "alternativeApproaches": ["Using requestAnimationFrame for UI updates", "Immediate execution variant"],
        },
        "rating": Decimal("4.5"),
        "rating_count": 128,
    },
    {
        "title": "Explain React Virtual DOM",
        "content": (
            "What is the Virtual DOM in React? How does it work and what are its benefits compared "
            "to direct DOM manipulation?"
        ),
        "type": QuestionType.CONCEPTUAL,
        "difficulty": Difficulty.EASY,
        "technologies": ["React", "JavaScript"],
        "roles": ["Frontend Developer", "Full Stack Developer"],
        "companies": ["Facebook", "Netflix", "Airbnb"],
        "tags": ["react", "virtual-dom", "performance"],
        "solution": {
            "explanation": (
                "The Virtual DOM is a JavaScript representation of the actual DOM. React uses it to "
                "optimize updates by diffing the virtual representation with the previous version."
            ),
            "codeExamples": [
                {
                    "language": "javascript",
                    "code": VIRTUAL_DOM_CODE,
                    "explanation": "Example of how React represents DOM elements in JavaScript objects",
                }
            ],
            "timeComplexity": "O(n) for diffing",
            "spaceComplexity": "O(n) for virtual tree",
            "alternativeApproaches": ["Direct DOM manipulation", "Other virtual DOM libraries like Vue.js"],
        },
        "rating": Decimal("4.7"),
        "rating_count": 89,
    },
    {
        "title": "Design a URL Shortener",
        "content": (
            "Design a URL shortening service like bit.ly. Consider the system architecture, database "
            "design, and how you would handle high traffic."
        ),
        "type": QuestionType.SYSTEM_DESIGN,
        "difficulty": Difficulty.HARD,
        "technologies": ["System Design", "Databases", "Caching"],
        "roles": ["Backend Developer", "Full Stack Developer"],
        "companies": ["Google", "Amazon", "Microsoft"],
        "tags": ["system-design", "scalability", "databases"],
        "solution": {
            "explanation": (
                "A URL shortener requires careful consideration of encoding algorithms, database "
                "design, caching strategies, and handling high read/write ratios."
            ),
            "codeExamples": [
                {
                    "language": "python",
                    "code": BASE62_CODE,
                    "explanation": "Base62 encoding for generating short URLs",
                }
            ],
            "timeComplexity": "O(1) for encoding/decoding",
            "spaceComplexity": "O(n) for storage",
            "alternativeApproaches": ["MD5 hashing with collision handling", "UUID-based approaches"],
        },
        "rating": Decimal("4.8"),
        "rating_count": 156,
    },
]

# (topic index, question index)
TOPIC_LINKS = [(0, 0), (1, 1)]


async def reset(db: AsyncSession) -> None:
    """Delete every catalogue and interview row, children first."""
    for model in (InterviewQuestion, MockInterview, TopicQuestion, Topic, Roadmap, Question, Role):
        await db.execute(delete(model))
    await db.commit()


async def seed(db: AsyncSession) -> dict[str, int]:
    roles = {data["name"]: Role(**data) for data in ROLES}
    db.add_all(roles.values())
    await db.flush()

    roadmaps = [Roadmap(role_id=roles[role_name].id, **fields) for role_name, fields in ROADMAPS]
    db.add_all(roadmaps)
    await db.flush()

    topics = [Topic(roadmap_id=roadmaps[0].id, **fields) for fields in JUNIOR_FRONTEND_TOPICS]
    questions = [Question(submitted_by="system", is_approved=True, **fields) for fields in QUESTIONS]
    db.add_all(topics + questions)
    await db.flush()

    links = [
        TopicQuestion(topic_id=topics[t].id, question_id=questions[q].id) for t, q in TOPIC_LINKS
    ]
    db.add_all(links)
    await db.commit()

    return {
        "roles": len(roles),
        "roadmaps": len(roadmaps),
        "topics": len(topics),
        "questions": len(questions),
        "topic_questions": len(links),
    }


async def main(reset_first: bool) -> int:
    configure_logging()
    await init_db()
    try:
        async with AsyncSessionLocal() as db:
            if reset_first:
                await reset(db)
                logger.info("Catalogue tables cleared")
            elif (await db.execute(select(func.count(Role.id)))).scalar_one():
                logger.warning("Roles already present, skipping seed (use --reset to reseed)")
                return 0
            counts = await seed(db)
        await cache_service.connect()
        await cache_service.delete_pattern("*")
        logger.info("Database seeded", **counts)
        return 0
    except Exception as e:
        logger.error("Database seeding failed", error=str(e))
        return 1
    finally:
        await cache_service.disconnect()
        await close_db()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the tech interview database")
    parser.add_argument("--reset", action="store_true", help="delete existing rows before seeding")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.reset)))
