"""Default content seeded into an empty store.

Each ``default_*`` call builds fresh model instances so callers may mutate
the result freely.
"""
from __future__ import annotations

from typing import Any, Dict, List

from .schemas import Challenge, Lesson, Quiz

_LESSONS: List[Dict[str, Any]] = [
    {
        "id": "lesson-1",
        "title": "Understanding Climate Change",
        "topic": "Climate Change",
        "description": "Learn what drives climate change and how it affects India and the world.",
        "content": (
            "# Understanding Climate Change\n\n"
            "Climate change is the long-term shift in temperatures and weather patterns. "
            "Burning fossil fuels releases carbon dioxide, the main greenhouse gas, which traps heat.\n\n"
            "## What you can do\n- Save electricity\n- Walk, cycle or use public transport\n- Plant trees"
        ),
        "image_url": "/assets/climate-change.jpg",
        "duration": 15,
        "difficulty": "beginner",
        "eco_points": 50,
    },
    {
        "id": "lesson-2",
        "title": "Waste Management & Recycling",
        "topic": "Waste Management",
        "description": "Segregate, reduce and recycle: the 5 R's of waste management.",
        "content": (
            "# Waste Management & Recycling\n\n"
            "India generates over 150,000 tonnes of municipal solid waste every day. "
            "Segregating wet (green bin) and dry (blue bin) waste at source makes recycling possible.\n\n"
            "## The 5 R's\nRefuse, Reduce, Reuse, Repurpose, Recycle."
        ),
        "image_url": "/assets/recycling.jpg",
        "duration": 12,
        "difficulty": "beginner",
        "eco_points": 50,
    },
    {
        "id": "lesson-3",
        "title": "Water Conservation Techniques",
        "topic": "Water Conservation",
        "description": "Simple habits and traditional structures that save water.",
        "content": (
            "# Water Conservation Techniques\n\n"
            "India holds about 4% of the world's freshwater for 18% of its people. "
            "Fix leaks, water plants early in the morning and harvest rainwater."
        ),
        "image_url": "/assets/water.jpg",
        "duration": 10,
        "difficulty": "beginner",
        "eco_points": 50,
    },
    {
        "id": "lesson-4",
        "title": "Biodiversity & Wildlife Protection",
        "topic": "Biodiversity",
        "description": "Why every species matters and how protected areas work.",
        "content": (
            "# Biodiversity & Wildlife Protection\n\n"
            "India is one of 17 megadiverse countries. Habitat loss, pollution and poaching "
            "threaten many species; national parks and community reserves protect them."
        ),
        "image_url": "/assets/biodiversity.jpg",
        "duration": 18,
        "difficulty": "intermediate",
        "eco_points": 75,
    },
    {
        "id": "lesson-5",
        "title": "Renewable Energy Solutions",
        "topic": "Renewable Energy",
        "description": "Solar, wind and hydro power and India's 2030 targets.",
        "content": (
            "# Renewable Energy Solutions\n\n"
            "India aims to meet half of its energy needs from renewable sources by 2030. "
            "Solar and wind lead the growth, supported by rooftop installations."
        ),
        "image_url": "/assets/renewable.jpg",
        "duration": 20,
        "difficulty": "intermediate",
        "eco_points": 75,
    },
]


def _q(qid: str, question: str, options: List[str], answer: int, explanation: str) -> Dict[str, Any]:
    return {"id": qid, "question": question, "options": options, "correct_answer": answer, "explanation": explanation}


_QUIZZES: List[Dict[str, Any]] = [
    {
        "id": "quiz-1",
        "lesson_id": "lesson-1",
        "title": "Climate Change Quiz",
        "description": "Test your knowledge about climate change and its impacts.",
        "passing_score": 70,
        "eco_points": 30,
        "questions": [
            _q("q1-1", "What is the main greenhouse gas responsible for climate change?",
               ["Oxygen", "Carbon Dioxide", "Nitrogen", "Hydrogen"], 1,
               "Carbon dioxide is the primary greenhouse gas emitted by burning fossil fuels."),
            _q("q1-2", "By what year has India committed to achieving net-zero emissions?",
               ["2030", "2050", "2070", "2100"], 2,
               "India pledged net-zero by 2070 at COP26."),
            _q("q1-3", "Which of these is NOT an effect of climate change?",
               ["Rising sea levels", "Increased rainfall everywhere", "Extreme weather events", "Melting glaciers"], 1,
               "Some regions get more rain while others face drought."),
            _q("q1-4", "What share of its energy does India aim to meet from renewables by 2030?",
               ["25%", "35%", "50%", "75%"], 2,
               "The 2030 target is 50%."),
            _q("q1-5", "Which activity contributes most to deforestation?",
               ["Natural forest fires", "Agricultural expansion", "Wildlife movement", "Rainfall"], 1,
               "Forests are cleared to create farmland."),
        ],
    },
    {
        "id": "quiz-2",
        "lesson_id": "lesson-2",
        "title": "Waste Management Quiz",
        "description": "Check your understanding of waste management and recycling principles.",
        "passing_score": 70,
        "eco_points": 30,
        "questions": [
            _q("q2-1", "How much municipal solid waste does India generate daily?",
               ["50,000 tonnes", "100,000 tonnes", "150,000 tonnes", "200,000 tonnes"], 2,
               "India generates over 150,000 tonnes every day."),
            _q("q2-2", "What color bin is used for wet/organic waste in India?",
               ["Blue", "Green", "Red", "Yellow"], 1,
               "Green bins take wet or organic waste."),
            _q("q2-3", "Which of the following is biodegradable waste?",
               ["Plastic bottles", "Food scraps", "Glass jars", "Metal cans"], 1,
               "Food scraps decompose naturally."),
            _q("q2-4", "What is the first R in the 5 R's of waste management?",
               ["Recycle", "Reduce", "Refuse", "Reuse"], 2,
               "Refusing unnecessary items prevents waste in the first place."),
            _q("q2-5", "How long does home composting typically take?",
               ["1 week", "2-3 weeks", "2-3 months", "1 year"], 2,
               "Usable compost takes about 2-3 months."),
        ],
    },
    {
        "id": "quiz-3",
        "lesson_id": "lesson-3",
        "title": "Water Conservation Quiz",
        "description": "Test your knowledge about water conservation techniques.",
        "passing_score": 70,
        "eco_points": 30,
        "questions": [
            _q("q3-1", "What percentage of the world's freshwater resources does India have?",
               ["2%", "4%", "8%", "12%"], 1,
               "India has about 4% of global freshwater."),
            _q("q3-2", "How much water does a dripping tap waste per day?",
               ["5 liters", "10 liters", "15 liters", "20 liters"], 2,
               "Roughly 15 liters a day."),
            _q("q3-3", "What is the best time to water plants to reduce evaporation?",
               ["Noon", "Afternoon", "Evening", "Early morning"], 3,
               "Cool mornings keep evaporation low."),
            _q("q3-4", "Which traditional water conservation structure is found in Rajasthan?",
               ["Ahar-Pyne", "Zabo", "Stepwells (Baolis)", "Eri"], 2,
               "Stepwells are found in Rajasthan and Gujarat."),
            _q("q3-5", "What is the main purpose of rainwater harvesting?",
               ["Decoration", "Collect and store rainwater", "Increase rainfall", "Water purification only"], 1,
               "It stores rainwater for later use."),
        ],
    },
]


def _c(cid: str, title: str, description: str, category: str, difficulty: str, points: int,
       duration: int, instructions: List[str], image: str) -> Dict[str, Any]:
    return {
        "id": cid,
        "title": title,
        "description": description,
        "category": category,
        "difficulty": difficulty,
        "eco_points": points,
        "duration": duration,
        "instructions": instructions,
        "verification_required": True,
        "image_url": image,
    }


_CHALLENGES: List[Dict[str, Any]] = [
    _c("challenge-1", "Plant a Tree Challenge",
       "Plant a tree in your school, home, or community and watch it grow!",
       "Environment", "easy", 100, 30,
       ["Choose a sunny location", "Pick a native species", "Plant and water it thoroughly",
        "Take a photo with your tree", "Submit your photo for verification"],
       "/assets/plant-tree.jpg"),
    _c("challenge-2", "Plastic-Free Week",
       "Avoid single-use plastic for an entire week.",
       "Waste Reduction", "medium", 150, 7,
       ["Carry a cloth bag and a steel bottle", "Refuse plastic straws and cutlery",
        "Keep a daily log", "Submit your log and photos"],
       "/assets/plastic-free.jpg"),
    _c("challenge-3", "Water Conservation Audit",
       "Audit water use at home and cut it down.",
       "Water Conservation", "medium", 120, 14,
       ["Record daily water use for a week", "Find and fix leaks",
        "Apply three saving measures", "Submit your before/after readings"],
       "/assets/water-audit.jpg"),
    _c("challenge-4", "Community Clean-Up Drive",
       "Organise a clean-up of a park, beach or street with friends.",
       "Community Action", "medium", 200, 1,
       ["Pick a location and get permission", "Gather volunteers and gloves",
        "Segregate collected waste", "Submit group photos"],
       "/assets/clean-up.jpg"),
    _c("challenge-5", "Start Composting at Home",
       "Turn kitchen waste into compost.",
       "Waste Management", "easy", 100, 90,
       ["Set up a compost bin", "Add greens and browns", "Turn it weekly",
        "Submit a photo of your compost"],
       "/assets/compost.jpg"),
    _c("challenge-6", "Energy Saving Challenge",
       "Reduce your household electricity use for a month.",
       "Energy Conservation", "hard", 250, 30,
       ["Note last month's meter reading", "Switch off idle appliances",
        "Use natural light", "Submit both bills"],
       "/assets/energy.jpg"),
    _c("challenge-7", "Wildlife Photography & Documentation",
       "Document the birds, insects and plants around you.",
       "Biodiversity", "medium", 150, 14,
       ["Photograph ten local species", "Identify each one", "Submit your species list"],
       "/assets/wildlife.jpg"),
    _c("challenge-8", "Eco-Friendly Transportation Week",
       "Walk, cycle or use public transport for a week.",
       "Transportation", "medium", 130, 7,
       ["Plan your routes", "Log each trip", "Submit your travel log"],
       "/assets/transport.jpg"),
]


def default_lessons() -> List[Lesson]:
    return [Lesson.model_validate(item) for item in _LESSONS]


def default_quizzes() -> List[Quiz]:
    return [Quiz.model_validate(item) for item in _QUIZZES]


def default_challenges() -> List[Challenge]:
    return [Challenge.model_validate(item) for item in _CHALLENGES]
