"""Quiz authoring screen and its local question draft."""

from dataclasses import dataclass, field, asdict
from typing import Any, Optional

from coursehub.client.api import ApiError
from coursehub.client.screens import Screen

OPTION_COUNT = 4


def _blank_options() -> list[str]:
    return [""] * OPTION_COUNT


@dataclass
class DraftQuestion:
    question: str = ""
    options: list[str] = field(default_factory=_blank_options)
    correct_answer: int = 0
    points: int = 10


@dataclass
class QuizDraft:
    title: str = ""
    description: str = ""
    passing_score: int = 70
    questions: list[DraftQuestion] = field(default_factory=lambda: [DraftQuestion()])

    def add_question(self) -> None:
        self.questions.append(DraftQuestion())

    def remove_question(self, index: int) -> None:
        del self.questions[index]

    def update_question(self, index: int, field_name: str, value: Any) -> None:
        if field_name not in ("question", "options", "correct_answer", "points"):
            raise KeyError(field_name)
        setattr(self.questions[index], field_name, value)

    def update_option(self, question_index: int, option_index: int, value: str) -> None:
        self.questions[question_index].options[option_index] = value

    def replace_questions(self, questions: list[dict]) -> None:
        self.questions = [
            DraftQuestion(
                question=q.get("question", ""),
                options=list(q.get("options") or _blank_options()),
                correct_answer=q.get("correct_answer", 0),
                points=q.get("points", 10),
            )
            for q in questions
        ]

    def submittable_questions(self) -> list[DraftQuestion]:
        return [q for q in self.questions if q.question.strip()]

    def reset(self) -> None:
        self.title, self.description, self.passing_score = "", "", 70
        self.questions = [DraftQuestion()]


class QuizAuthoringScreen(Screen):
    def __init__(self, client, course_id: Optional[str]):
        super().__init__(client)
        self.course_id = course_id
        self.loading = False
        self.ai_loading = False
        self.course_title = ""
        self.course_description = ""
        self.quizzes: list[dict] = []
        self.draft = QuizDraft()
        self.show_create_dialog = False

    async def load(self) -> None:
        if not self.course_id:
            return
        self.loading = True
        try:
            data = await self.client.list_quizzes(self.course_id)
            self.course_title = data["course_title"]
            self.course_description = data.get("course_description") or ""
            self.quizzes = data["quizzes"]
        except ApiError as e:
            self.notify("error", e.detail, title="Error")
        finally:
            self.loading = False

    async def generate_with_ai(self) -> bool:
        """Replace the draft questions with AI output; keep them on failure."""
        if self.ai_loading:
            return False
        self.ai_loading = True
        try:
            data = await self.client.generate_quiz(
                course_title=self.course_title,
                course_description=self.course_description,
                number_of_questions=5,
                difficulty="medium",
            )
        except ApiError as e:
            self.notify("error", e.detail, title="Error")
            return False
        finally:
            self.ai_loading = False

        if not data.get("questions"):
            return False
        self.draft.replace_questions(data["questions"])
        self.notify("success", "AI generated quiz questions successfully", title="Success")
        return True

    async def create_quiz(self) -> bool:
        if not self.course_id or self.loading:
            return False
        self.loading = True
        try:
            await self.client.create_quiz(
                course_id=self.course_id,
                title=self.draft.title,
                description=self.draft.description,
                passing_score=self.draft.passing_score,
                questions=[asdict(q) for q in self.draft.submittable_questions()],
            )
        except ApiError as e:
            self.notify("error", e.detail, title="Error")
            return False
        finally:
            self.loading = False

        self.notify("success", "Quiz created successfully", title="Success")
        self.show_create_dialog = False
        self.draft.reset()
        await self.load()
        return True
