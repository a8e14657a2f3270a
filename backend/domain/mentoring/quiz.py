"""
Career-interest quiz: static question bank and lookup-table scorer.

Each option carries a weight and a list of career tags. Scoring adds the
weight to every tag of every answered option; careers are ranked by score
(descending, ties keep first-seen order) and the top five are returned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

TOP_CAREERS = 5


@dataclass(frozen=True)
class QuizOption:
    text: str
    careers: Tuple[str, ...]
    weight: int


@dataclass(frozen=True)
class QuizQuestion:
    id: int
    question: str
    options: Tuple[QuizOption, ...]

    def option(self, index: int) -> Optional[QuizOption]:
        if 0 <= index < len(self.options):
            return self.options[index]
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "options": [
                {"text": o.text, "careers": list(o.careers), "weight": o.weight}
                for o in self.options
            ],
        }


@dataclass(frozen=True)
class Answer:
    question_id: int
    selected_option: int


@dataclass(frozen=True)
class CareerScore:
    career: str
    score: int

    def to_dict(self) -> dict:
        return {"career": self.career, "score": self.score}


def _q(qid: int, text: str, *options: Tuple[str, Sequence[str], int]) -> QuizQuestion:
    return QuizQuestion(
        id=qid,
        question=text,
        options=tuple(QuizOption(t, tuple(c), w) for t, c, w in options),
    )


CAREER_QUESTIONS: Tuple[QuizQuestion, ...] = (
    _q(1, "What subjects do you enjoy studying the most?",
       ("Mathematics and Science", ["Engineering", "Computer Science", "Medical", "Technology"], 3),
       ("Literature and Languages", ["Arts", "Literature", "Teaching", "Law"], 2),
       ("Business and Economics", ["Commerce", "Business", "Finance", "Management"], 2),
       ("Sports and Physical Activities", ["Sports", "Physical Education", "Fitness", "Coaching"], 1)),
    _q(2, "How do you prefer to spend your free time?",
       ("Solving puzzles and problems", ["Engineering", "Computer Science", "Science", "Technology"], 3),
       ("Reading books and writing", ["Literature", "Arts", "Teaching", "Journalism"], 2),
       ("Organizing events and leading groups", ["Business", "Management", "Teaching", "Politics"], 2),
       ("Creating art or music", ["Arts", "Music", "Design", "Creative"], 2)),
    _q(3, "What type of work environment appeals to you?",
       ("Laboratory or technical setting", ["Science", "Medical", "Engineering", "Technology"], 3),
       ("Office with people interaction", ["Business", "Management", "Teaching", "Law"], 2),
       ("Creative studio or workshop", ["Arts", "Design", "Music", "Creative"], 2),
       ("Outdoor or field work", ["Agriculture", "Sports", "Environmental", "Adventure"], 1)),
    _q(4, "What are your strengths?",
       ("Analytical thinking and problem-solving", ["Engineering", "Computer Science", "Science", "Technology"], 3),
       ("Communication and interpersonal skills", ["Teaching", "Business", "Law", "Management"], 2),
       ("Creativity and artistic abilities", ["Arts", "Design", "Music", "Creative"], 2),
       ("Physical fitness and coordination", ["Sports", "Physical Education", "Dance", "Fitness"], 1)),
    _q(5, "What motivates you the most?",
       ("Innovation and discovery", ["Science", "Technology", "Engineering", "Research"], 3),
       ("Helping and teaching others", ["Teaching", "Medical", "Social Work", "Counseling"], 2),
       ("Financial success and leadership", ["Business", "Management", "Finance", "Entrepreneurship"], 2),
       ("Creative expression and recognition", ["Arts", "Music", "Design", "Entertainment"], 2)),
)


def score_answers(
    answers: Iterable[Answer],
    questions: Sequence[QuizQuestion] = CAREER_QUESTIONS,
    top: int = TOP_CAREERS,
) -> List[CareerScore]:
    """Rank careers for a set of answers. Unknown questions or options are skipped."""
    by_id: Dict[int, QuizQuestion] = {q.id: q for q in questions}
    scores: Dict[str, int] = {}
    for answer in answers:
        question = by_id.get(answer.question_id)
        option = question.option(answer.selected_option) if question else None
        if option is None:
            continue
        for career in option.careers:
            scores[career] = scores.get(career, 0) + option.weight

    # sorted() is stable: equal scores keep insertion order.
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    return [CareerScore(career=c, score=s) for c, s in ranked[:top]]


CAREER_INFO: Dict[str, Dict[str, object]] = {
    "Engineering": {
        "description": "Design and build systems, structures, and products",
        "skills": ["Mathematics", "Physics", "Problem-solving", "Technical drawing"],
        "courses": ["B.Tech", "B.E.", "Diploma in Engineering"],
        "exams": ["JEE Main", "JEE Advanced", "BITSAT", "VITEEE"],
    },
    "Medical": {
        "description": "Healthcare and medical treatment",
        "skills": ["Biology", "Chemistry", "Compassion", "Attention to detail"],
        "courses": ["MBBS", "BDS", "BAMS", "BHMS"],
        "exams": ["NEET", "AIIMS", "JIPMER"],
    },
    "Computer Science": {
        "description": "Software development and technology",
        "skills": ["Programming", "Logic", "Problem-solving", "Creativity"],
        "courses": ["B.Tech CSE", "BCA", "B.Sc Computer Science"],
        "exams": ["JEE Main", "BITSAT", "VITEEE", "CUET"],
    },
    "Arts": {
        "description": "Creative expression and cultural studies",
        "skills": ["Creativity", "Communication", "Critical thinking", "Cultural awareness"],
        "courses": ["BA", "BFA", "BVA", "B.Des"],
        "exams": ["CUET", "NID", "NIFT", "JNUEE"],
    },
    "Commerce": {
        "description": "Business, finance, and trade",
        "skills": ["Mathematics", "Analytical thinking", "Communication", "Leadership"],
        "courses": ["B.Com", "BBA", "BMS", "CA"],
        "exams": ["CUET", "IPMAT", "SET", "DUET"],
    },
    "Teaching": {
        "description": "Education and knowledge sharing",
        "skills": ["Communication", "Patience", "Leadership", "Subject knowledge"],
        "courses": ["B.Ed", "BA + B.Ed", "B.Sc + B.Ed"],
        "exams": ["CTET", "TET", "CUET"],
    },
    "Law": {
        "description": "Legal system and justice",
        "skills": ["Analytical thinking", "Communication", "Research", "Ethics"],
        "courses": ["LLB", "BA LLB", "BBA LLB"],
        "exams": ["CLAT", "AILET", "LSAT"],
    },
    "Business": {
        "description": "Management and entrepreneurship",
        "skills": ["Leadership", "Communication", "Strategic thinking", "Financial literacy"],
        "courses": ["BBA", "BMS", "B.Com", "MBA"],
        "exams": ["CUET", "IPMAT", "SET", "CAT"],
    },
}
