from __future__ import annotations

from ..auth.session import UserSession
from ..core.enums import Standing
from ..stats.calculator import classes_needed_to_attend, meets_requirement, percentage, standing
from ..subjects.service import SubjectService

_PERFORMANCE = {Standing.SAFE: "good", Standing.WARNING: "warning", Standing.DANGER: "risk"}


class AnalyticsView:
    def __init__(self, subjects: SubjectService):
        self._subjects = subjects

    def load(self, session: UserSession) -> dict:
        subjects = self._subjects.list(session)

        total_classes = sum(s.total_classes for s in subjects)
        total_attended = sum(s.attended_classes for s in subjects)
        average = round(total_attended * 100 / total_classes, 1) if total_classes else 0.0

        performance = []
        for s in subjects:
            pct = percentage(s.attended_classes, s.total_classes)
            performance.append(
                {
                    "id": s.subject_id,
                    "name": s.name,
                    "code": s.code,
                    "percentage": pct,
                    "required_percentage": s.required_percentage,
                    "status": _PERFORMANCE[standing(s.attended_classes, s.total_classes, s.required_percentage)],
                    "attended_classes": s.attended_classes,
                    "total_classes": s.total_classes,
                }
            )
        performance.sort(key=lambda item: item["percentage"])

        at_risk = sum(
            1
            for item in performance
            if not meets_requirement(item["attended_classes"], item["total_classes"], item["required_percentage"])
        )

        recommendations = []
        for item in performance:
            if item["status"] != "risk":
                continue
            needed = classes_needed_to_attend(item["attended_classes"], item["total_classes"], item["required_percentage"])
            if needed is None:
                message = f"{item['required_percentage']}% attendance can no longer be reached"
            else:
                message = f"Attend {needed} more classes to reach {item['required_percentage']}% attendance"
            recommendations.append({"subject_id": item["id"], "name": item["name"], "classes_needed": needed, "message": message})

        return {
            "overall": {
                "total_subjects": len(subjects),
                "average_attendance": average,
                "subjects_at_risk": at_risk,
                "subjects_on_track": len(subjects) - at_risk,
                "total_classes": total_classes,
                "total_attended": total_attended,
            },
            "subjects": performance,
            "recommendations": recommendations,
        }
