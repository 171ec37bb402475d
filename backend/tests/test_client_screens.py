"""End-to-end tests: screen controllers driving the real API over ASGI."""

import asyncio
import json

import pytest

from coursehub.client import (
    CatalogScreen,
    CourseFormScreen,
    CourseHubClient,
    DashboardScreen,
    Navbar,
    QuizAuthoringScreen,
    QuizDraft,
    RoleState,
    Session,
    SessionStore,
    VideoPlayerScreen,
)
from coursehub.client.api import ConflictError, ExternalServiceError, NotFoundError
from coursehub.models import Course, Enrollment, Profile, Quiz, QuizQuestion
from coursehub.services import quiz_generator


class RequestLog:
    def __init__(self):
        self.requests = []

    async def __call__(self, request):
        self.requests.append((request.method, request.url.path))


def _signed_in(token, profile_id, role):
    return SessionStore(Session(access_token=token, user={"id": profile_id, "role": role}))


@pytest.mark.anyio
class TestCatalogScreen:
    async def test_signed_out_enroll_issues_no_request(self, http_factory, make_profile, make_course, count_rows):
        """Enrolling while signed out only shows a toast."""
        teacher_id, _, _ = make_profile("t@example.com", role="teacher")
        course_id = make_course(teacher_id)
        log = RequestLog()

        async with http_factory(event_hooks={"request": [log]}) as http:
            screen = CatalogScreen(CourseHubClient(http))
            await screen.load()
            assert not screen.loading
            assert len(screen.courses) == 1
            before = len(log.requests)

            assert await screen.enroll(course_id) is False

        assert len(log.requests) == before
        assert screen.last_toast.message == "Please sign in to enroll"
        assert count_rows(Enrollment) == 0

    async def test_enroll_reloads_and_duplicate_is_distinct(self, http_factory, make_profile, make_course):
        """Enrolling reloads the catalog; a repeat shows the conflict message."""
        teacher_id, _, _ = make_profile("t@example.com", role="teacher")
        course_id = make_course(teacher_id)
        student_id, _, token = make_profile("s@example.com")

        async with http_factory() as http:
            screen = CatalogScreen(CourseHubClient(http, _signed_in(token, student_id, "student")))
            await screen.load()
            assert screen.courses[0]["enrollment_count"] == 0

            assert await screen.enroll(course_id) is True
            assert screen.last_toast.level == "success"
            assert screen.courses[0]["enrollment_count"] == 1
            assert screen.enrolling is None

            assert await screen.enroll(course_id) is False
            assert screen.last_toast.message == "You're already enrolled in this course"

    async def test_generic_failure_message(self, http_factory, make_profile):
        """Non-conflict failures show the generic enrollment error."""
        student_id, _, token = make_profile("s@example.com")
        async with http_factory() as http:
            screen = CatalogScreen(CourseHubClient(http, _signed_in(token, student_id, "student")))
            assert await screen.enroll("missing-course") is False
        assert screen.last_toast.message == "Failed to enroll in course"


@pytest.mark.anyio
class TestVideoPlayerScreen:
    async def test_not_found_issues_no_further_requests(self, http_factory):
        """An unknown course stops after the one lookup."""
        log = RequestLog()
        async with http_factory(event_hooks={"request": [log]}) as http:
            screen = VideoPlayerScreen(CourseHubClient(http), "missing")
            assert await screen.load() == "not_found"

        assert log.requests == [("GET", "/api/courses/missing")]
        assert screen.chat is None
        assert screen.toasts == []

    async def test_ready_with_player(self, http_factory, make_profile, make_course):
        """A YouTube course exposes its video id and embed URL."""
        teacher_id, _, _ = make_profile("t@example.com", role="teacher")
        course_id = make_course(teacher_id, "Cells", video_url="https://youtu.be/URUJD5NEXC8")

        async with http_factory() as http:
            screen = VideoPlayerScreen(CourseHubClient(http), course_id)
            assert await screen.load() == "ready"

        assert screen.video_id == "URUJD5NEXC8"
        assert screen.embed_url == "https://www.youtube.com/embed/URUJD5NEXC8"
        assert not screen.shows_placeholder
        assert screen.chat.video_title == "Cells"

    async def test_placeholder_for_unrecognised_url(self, http_factory, make_profile, make_course):
        """A non-YouTube URL shows the placeholder."""
        teacher_id, _, _ = make_profile("t@example.com", role="teacher")
        course_id = make_course(teacher_id, video_url="https://vimeo.com/1")

        async with http_factory() as http:
            screen = VideoPlayerScreen(CourseHubClient(http), course_id)
            await screen.load()
        assert screen.shows_placeholder

    async def test_chat_round_trip_through_api(self, http_factory, make_profile, make_course, monkeypatch):
        """The widget's question reaches the AI function and the reply is shown."""
        from coursehub.services import video_chat

        teacher_id, _, _ = make_profile("t@example.com", role="teacher")
        course_id = make_course(teacher_id, "Cells")
        student_id, _, token = make_profile("s@example.com")

        async def fake_chat(system, messages, max_tokens=600, temperature=0.7):
            return "Mitochondria make ATP."

        monkeypatch.setattr(video_chat, "chat", fake_chat)
        async with http_factory() as http:
            screen = VideoPlayerScreen(CourseHubClient(http, _signed_in(token, student_id, "student")), course_id)
            await screen.load()
            await screen.chat.send("What do mitochondria do?")

        assert [m.content for m in screen.chat.messages[1:]] == [
            "What do mitochondria do?",
            "Mitochondria make ATP.",
        ]


@pytest.mark.anyio
class TestCourseFormScreen:
    async def test_submit_without_session_writes_nothing(self, http_factory, count_rows):
        """Submitting while signed out sends nothing."""
        log = RequestLog()
        async with http_factory(event_hooks={"request": [log]}) as http:
            screen = CourseFormScreen(CourseHubClient(http))
            screen.form.title = "Chemistry"
            assert await screen.submit() is False

        assert log.requests == []
        assert screen.last_toast.message == "You must be logged in to create a course"
        assert count_rows(Course) == 0

    async def test_invalid_url_blocks_submit(self, http_factory, make_profile, count_rows):
        """An invalid video URL is caught before the request."""
        teacher_id, _, token = make_profile("t@example.com", role="teacher")
        async with http_factory() as http:
            screen = CourseFormScreen(CourseHubClient(http, _signed_in(token, teacher_id, "teacher")))
            screen.form.title = "Chemistry"
            screen.form.video_url = "https://example.com/video"
            assert await screen.submit() is False
        assert screen.last_toast.title == "Invalid URL"
        assert count_rows(Course) == 0

    async def test_submit_creates_course_and_redirects(self, http_factory, make_profile, count_rows):
        """A valid form creates the course and goes to the dashboard."""
        teacher_id, _, token = make_profile("t@example.com", role="teacher")
        async with http_factory() as http:
            screen = CourseFormScreen(CourseHubClient(http, _signed_in(token, teacher_id, "teacher")))
            screen.form.title = "Chemistry"
            screen.form.video_url = "https://www.youtube.com/watch?v=FSyAehMdpyI"
            assert await screen.submit() is True
        assert screen.redirect == "/dashboard"
        assert count_rows(Course, teacher_id=teacher_id, title="Chemistry") == 1

    async def test_prefill_from_search_through_api(self, http_factory, make_profile, monkeypatch):
        """Only the last keystroke searches; picking a result fills the form."""
        teacher_id, _, token = make_profile("t@example.com", role="teacher")
        queries = []

        async def fake_search(query):
            queries.append(query)
            return [{
                "video_id": "abc123",
                "title": "Acids and Bases",
                "description": "pH explained",
                "channel_title": "Crash Course",
                "thumbnail_url": None,
                "url": "https://www.youtube.com/watch?v=abc123",
            }]

        monkeypatch.setattr("coursehub.routers.videos.search_videos", fake_search)
        async with http_factory() as http:
            screen = CourseFormScreen(
                CourseHubClient(http, _signed_in(token, teacher_id, "teacher")), search_delay=0.01
            )
            screen.form.title = "Old title"
            for partial in ("ac", "acid", "acids and bases"):
                screen.on_search_input(partial)
            await screen.wait_for_search()

            assert queries == ["acids and bases"]
            assert len(screen.suggestions) == 1

            screen.select_suggestion(screen.suggestions[0])

        assert screen.form.title == "Acids and Bases"
        assert screen.form.description == "pH explained"
        assert screen.form.video_url == "https://www.youtube.com/watch?v=abc123"
        assert screen.suggestions == []
        assert screen.search_query == ""


class FakeSearchClient:
    """Just enough client for the search side of the course form."""

    def __init__(self):
        self.gates = {}
        self.queries = []
        self.fail = False

    def get_session(self):
        return None

    async def search_videos(self, query):
        self.queries.append(query)
        if query in self.gates:
            await self.gates[query].wait()
        if self.fail:
            raise ExternalServiceError("quota exceeded", 502)
        return [{"video_id": query, "title": query, "description": "", "url": f"https://youtu.be/{query}"}]


@pytest.mark.anyio
class TestDebouncedSearch:
    async def test_superseded_in_flight_result_is_discarded(self):
        """A slower older search never overwrites newer suggestions."""
        fake = FakeSearchClient()
        fake.gates["slow"] = asyncio.Event()
        screen = CourseFormScreen(fake, search_delay=0.01)

        screen.on_search_input("slow")
        await asyncio.sleep(0.05)
        assert fake.queries == ["slow"]  # now awaiting its response

        screen.on_search_input("fast")
        fake.gates["slow"].set()
        await screen.wait_for_search()
        await asyncio.sleep(0.01)

        assert [s["video_id"] for s in screen.suggestions] == ["fast"]

    async def test_clearing_the_box_cancels_pending_search(self):
        """Emptying the search box cancels the pending search."""
        fake = FakeSearchClient()
        screen = CourseFormScreen(fake, search_delay=0.05)
        screen.on_search_input("python")
        screen.on_search_input("")
        await asyncio.sleep(0.1)
        assert fake.queries == []
        assert screen.suggestions == []

    async def test_failure_is_non_fatal(self):
        """A failed search shows an error but leaves the form usable."""
        fake = FakeSearchClient()
        fake.fail = True
        screen = CourseFormScreen(fake, search_delay=0.01)
        screen.form.video_url = "https://youtu.be/manual"

        screen.on_search_input("python")
        await screen.wait_for_search()

        assert screen.suggestions == []
        assert screen.search_error is not None
        assert screen.last_toast.title == "Search Failed"
        assert screen.form.video_url == "https://youtu.be/manual"
        assert not screen.searching


@pytest.mark.anyio
class TestDashboardScreen:
    async def test_signed_out_redirects_without_request(self, http_factory):
        """No session redirects to sign-in without calling the API."""
        log = RequestLog()
        async with http_factory(event_hooks={"request": [log]}) as http:
            screen = DashboardScreen(CourseHubClient(http))
            assert await screen.load() == RoleState.UNAUTHENTICATED
        assert screen.redirect == "/auth"
        assert log.requests == []

    @pytest.mark.parametrize("role,expected", [
        ("student", RoleState.STUDENT),
        ("teacher", RoleState.TEACHER),
        (None, RoleState.NO_ROLE),
    ])
    async def test_branches_on_role(self, http_factory, make_profile, role, expected):
        """Each role lands in its own dashboard state."""
        profile_id, _, token = make_profile("u@example.com", role=role)
        async with http_factory() as http:
            screen = DashboardScreen(CourseHubClient(http, _signed_in(token, profile_id, role)))
            assert await screen.load() == expected
        if expected == RoleState.NO_ROLE:
            assert screen.data is None
        else:
            assert screen.data["stats"] is not None

    async def test_sign_in_then_gate(self, http_factory, make_profile):
        """Signing in through the client opens the matching dashboard."""
        make_profile("t@example.com", role="teacher", password="hunter22")
        async with http_factory() as http:
            client = CourseHubClient(http)
            session = await client.sign_in("t@example.com", "hunter22")
            assert session.role == "teacher"
            assert await DashboardScreen(client).load() == RoleState.TEACHER


class TestNavbar:
    def test_subscription_follows_session_and_is_released(self):
        """The navbar tracks sign-in and sign-out and unsubscribes on exit."""
        store = SessionStore()
        client = CourseHubClient(http=None, sessions=store)

        with Navbar(client) as navbar:
            assert store.listener_count == 1
            assert navbar.links == ["/", "/courses"]
            assert navbar.actions == ["sign_in", "get_started"]

            store.set_session(Session(access_token="t", user={"id": "u1", "role": "student"}))
            assert navbar.signed_in
            assert "/dashboard" in navbar.links

            navbar.sign_out()
            assert not navbar.signed_in
            assert navbar.redirect == "/"
            assert navbar.last_toast.message == "Signed out successfully"

        assert store.listener_count == 0

    def test_session_store_subscription_context(self):
        """Listeners stop hearing changes once the block exits."""
        store = SessionStore()
        seen = []
        with store.subscription(seen.append) as current:
            assert current is None
            store.set_session(Session(access_token="t"))
            store.sign_out()
        store.set_session(Session(access_token="late"))
        assert [s.access_token if s else None for s in seen] == ["t", None]


class TestQuizDraft:
    """Local question-list editing."""

    def test_starts_with_one_blank_question(self):
        """A new draft has one question with four empty options."""
        draft = QuizDraft()
        assert len(draft.questions) == 1
        assert draft.questions[0].options == ["", "", "", ""]
        assert draft.passing_score == 70

    def test_add_edit_remove(self):
        """Questions can be added, edited and removed."""
        draft = QuizDraft()
        draft.add_question()
        draft.update_question(0, "question", "What is 2 + 2?")
        draft.update_option(0, 1, "4")
        draft.update_question(0, "correct_answer", 1)
        draft.update_question(1, "question", "Scratch")
        draft.remove_question(1)

        assert len(draft.questions) == 1
        assert draft.questions[0].options == ["", "4", "", ""]
        assert draft.questions[0].correct_answer == 1

    def test_options_are_not_shared_between_questions(self):
        """Each question owns its own options list."""
        draft = QuizDraft()
        draft.add_question()
        draft.update_option(0, 0, "only here")
        assert draft.questions[1].options[0] == ""

    def test_unknown_field_rejected(self):
        """Only known question fields can be updated."""
        with pytest.raises(KeyError):
            QuizDraft().update_question(0, "colour", "red")

    def test_submittable_skips_blank_text(self):
        """Blank questions are left out of the submission."""
        draft = QuizDraft()
        draft.update_question(0, "question", "Kept 1")
        draft.add_question()
        draft.add_question()
        draft.update_question(2, "question", "Kept 2")
        assert [q.question for q in draft.submittable_questions()] == ["Kept 1", "Kept 2"]


@pytest.mark.anyio
class TestQuizAuthoringScreen:
    async def test_generate_then_create(self, http_factory, make_profile, make_course, monkeypatch, count_rows):
        """Generated questions replace the draft and are saved without blanks."""
        teacher_id, _, token = make_profile("t@example.com", role="teacher")
        course_id = make_course(teacher_id, "Optics", description="Lenses")

        async def fake_chat(system, messages, max_tokens=600, temperature=0.7):
            return json.dumps({"questions": [
                {"question": f"Q{i}", "options": ["a", "b", "c", "d"], "correct_answer": 1, "points": 10}
                for i in range(5)
            ]})

        monkeypatch.setattr(quiz_generator, "chat", fake_chat)
        async with http_factory() as http:
            screen = QuizAuthoringScreen(CourseHubClient(http, _signed_in(token, teacher_id, "teacher")), course_id)
            await screen.load()
            assert screen.course_title == "Optics"
            assert screen.quizzes == []

            assert await screen.generate_with_ai() is True
            assert [q.question for q in screen.draft.questions] == [f"Q{i}" for i in range(5)]

            screen.draft.title = "Lens quiz"
            screen.draft.update_question(2, "question", "  ")
            assert await screen.create_quiz() is True

            assert len(screen.quizzes) == 1
            assert screen.quizzes[0]["question_count"] == 4
            assert screen.draft.title == ""
            assert len(screen.draft.questions) == 1

        assert count_rows(Quiz, course_id=course_id) == 1
        assert count_rows(QuizQuestion) == 4

    async def test_generation_failure_keeps_draft(self, http_factory, make_profile, make_course, monkeypatch):
        """A failed generation leaves the draft untouched."""
        teacher_id, _, token = make_profile("t@example.com", role="teacher")
        course_id = make_course(teacher_id, "Optics")

        async def broken_chat(*args, **kwargs):
            return "not json"

        monkeypatch.setattr(quiz_generator, "chat", broken_chat)
        async with http_factory() as http:
            screen = QuizAuthoringScreen(CourseHubClient(http, _signed_in(token, teacher_id, "teacher")), course_id)
            await screen.load()
            screen.draft.update_question(0, "question", "My own question")
            assert await screen.generate_with_ai() is False

        assert screen.last_toast.level == "error"
        assert [q.question for q in screen.draft.questions] == ["My own question"]
        assert not screen.ai_loading

    async def test_create_failure_keeps_draft(self, http_factory, make_profile, make_course, count_rows):
        """A rejected save keeps the draft for another try."""
        teacher_id, _, _ = make_profile("t@example.com", role="teacher")
        course_id = make_course(teacher_id)
        student_id, _, token = make_profile("s@example.com")

        async with http_factory() as http:
            screen = QuizAuthoringScreen(CourseHubClient(http, _signed_in(token, student_id, "student")), course_id)
            screen.draft.title = "Sneaky"
            screen.draft.update_question(0, "question", "Q")
            assert await screen.create_quiz() is False

        assert screen.draft.title == "Sneaky"
        assert count_rows(Quiz) == 0


@pytest.mark.anyio
class TestClientAccountAndQuizReads:
    """Client calls used outside the screen controllers."""

    async def test_sign_up_then_sign_in(self, http_factory, count_rows):
        """A registered profile can sign in and becomes the current session."""
        store = SessionStore()
        seen = []
        store.subscribe(seen.append)
        async with http_factory() as http:
            client = CourseHubClient(http, store)
            profile = await client.sign_up("New@Example.com", "pw-123456", full_name="Nia", role="student")
            assert profile["email"] == "new@example.com"
            assert profile["role"] == "student"
            assert client.get_session() is None

            session = await client.sign_in("new@example.com", "pw-123456")

        assert session.user_id == profile["id"]
        assert store.get_session() is session
        assert seen == [session]
        assert count_rows(Profile, email="new@example.com") == 1

    async def test_sign_up_duplicate_is_conflict(self, http_factory, make_profile):
        """Registering a taken email raises ConflictError."""
        make_profile("taken@example.com")
        async with http_factory() as http:
            with pytest.raises(ConflictError):
                await CourseHubClient(http).sign_up("taken@example.com", "pw-123456")

    async def test_get_quiz_hides_answers_from_students(
        self, http_factory, make_profile, make_course, make_quiz, db
    ):
        """Students read the questions in order without the answer index."""
        teacher_id, _, teacher_token = make_profile("t@example.com", role="teacher")
        course_id = make_course(teacher_id)
        quiz_id = make_quiz(course_id, "Checkpoint")
        db.add_all([
            QuizQuestion(quiz_id=quiz_id, position=1, question="Second", options=["a", "b"], correct_answer=1),
            QuizQuestion(quiz_id=quiz_id, position=0, question="First", options=["c", "d"], correct_answer=0),
        ])
        db.commit()
        student_id, _, student_token = make_profile("s@example.com")

        async with http_factory() as http:
            as_student = await CourseHubClient(http, _signed_in(student_token, student_id, "student")).get_quiz(quiz_id)
            as_owner = await CourseHubClient(http, _signed_in(teacher_token, teacher_id, "teacher")).get_quiz(quiz_id)
            with pytest.raises(NotFoundError):
                await CourseHubClient(http).get_quiz("missing")

        assert [q["question"] for q in as_student["questions"]] == ["First", "Second"]
        assert all(q["correct_answer"] is None for q in as_student["questions"])
        assert [q["correct_answer"] for q in as_owner["questions"]] == [0, 1]
