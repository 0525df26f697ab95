"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; enrollment, matching and marking live in services.
"""

from face_attendance.container import build_container
from face_attendance.database.memory_backend import MemoryBackend


def main():
    container = build_container(backend=MemoryBackend(), timezone="UTC")

    ada = container.student_service.enroll(full_name="Ada", student_code="S001", signature=[0.1, 0.2, 0.3])
    print(container.scan_service.submit_signature([0.1, 0.2, 0.31]).to_dict())
    print(container.scan_service.submit_signature([0.1, 0.2, 0.31]).to_dict())
    print(container.scan_service.submit_signature([0.9, 0.9, 0.9]).to_dict())

    report = container.attendance_service.day_report(container.attendance_service.today())
    print(f"{ada.full_name}: {report.present_count}/{report.total_students} present ({report.present_percent}%)")


if __name__ == "__main__":
    main()
