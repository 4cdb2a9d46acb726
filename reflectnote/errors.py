class DuplicateStudentIdError(ValueError):
    """An active student in the same class already uses this student id."""

    def __init__(self, student_id: str | None) -> None:
        self.student_id = student_id
        super().__init__(f'Student ID {student_id} already exists.')
