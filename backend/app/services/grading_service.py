"""Grading 서비스"""
from app.models.grading import (
    CheckRequest,
    CheckResponse,
    ScaleResponse,
    SubmitRequest,
    SubmitResponse,
)
from engine.core.grading import (
    calculate_points,
    check_answer,
    convert_to_nmt_scale,
    count_correct,
    grade_submission,
    resolve_points,
)


class GradingService:
    """채점 서비스 (engine.core.grading 래핑)"""

    @staticmethod
    def check(req: CheckRequest) -> CheckResponse:
        row_count = len(req.correct_answers) if req.type == "matching" else None
        total = resolve_points(req.type, req.points, row_count)

        is_correct, partial = check_answer(req.type, req.user_answer, req.correct_answers)
        hits, answers = count_correct(req.type, req.user_answer, req.correct_answers)
        points = calculate_points(is_correct, partial, total, hits, answers)
        return CheckResponse(is_correct=is_correct, partial_credit=partial, points=points)

    @staticmethod
    def submit(req: SubmitRequest) -> SubmitResponse:
        questions = [
            {
                "id": q.id,
                "type": q.type,
                "points": q.points,
                "answers": [row.model_dump() for row in q.answers],
            }
            for q in req.questions
        ]
        answers = [a.model_dump() for a in req.answers]
        result = grade_submission(questions, answers, req.test_type, req.subject_slug)
        return SubmitResponse.model_validate(result)

    @staticmethod
    def scale(subject_slug: str, raw: int) -> ScaleResponse:
        return ScaleResponse(subject_slug=subject_slug, raw=raw, scaled=convert_to_nmt_scale(raw, subject_slug))
