"""
REST boundary for the Registrar ledger using FastAPI.

The boundary resolves the caller from the ``X-Caller`` header and stamps
each mutation with the server clock. It performs no authentication and no
domain validation of its own: every rule lives in the ledger, and ledger
errors are mapped to HTTP statuses by one exception handler.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from fastapi import Depends, FastAPI, Header, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..core.entities import Course, Grade, Student
from ..core.exceptions import (
    AlreadyExists, CapacityExceeded, InvalidArgument, NotAssigned, NotEnrolled,
    NotFound, RegistrarError, Unauthorized,
)
from ..services import EventService, LedgerService

logger = logging.getLogger(__name__)

CALLER_HEADER = "X-Caller"

# Most specific class first; the first isinstance match wins.
ERROR_STATUS: List[tuple] = [
    (Unauthorized, status.HTTP_403_FORBIDDEN),
    (InvalidArgument, status.HTTP_400_BAD_REQUEST),
    (NotAssigned, status.HTTP_404_NOT_FOUND),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (AlreadyExists, status.HTTP_409_CONFLICT),
    (CapacityExceeded, status.HTTP_409_CONFLICT),
    (NotEnrolled, status.HTTP_409_CONFLICT),
]


def status_for(error: RegistrarError) -> int:
    for error_type, code in ERROR_STATUS:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def caller_identity(caller: Optional[str] = Header(None, alias=CALLER_HEADER)) -> str:
    """Resolve the acting identity; a request without one is unauthorized."""
    if not caller:
        raise Unauthorized("Missing caller identity")
    return caller


# Pydantic models for API
class TeacherRequest(BaseModel):
    identity: str


class StudentCreate(BaseModel):
    name: str
    age: int


class CourseCreate(BaseModel):
    name: str
    description: str = ""
    teacher: str
    capacity: int


class EnrollmentRequest(BaseModel):
    student_id: int
    course_id: int


class GradeAssign(BaseModel):
    student_id: int
    course_id: int
    score: int
    remarks: str = ""


class CreatedResponse(BaseModel):
    id: int


class StudentResponse(BaseModel):
    id: int
    name: str
    age: int
    active: bool
    enrolled_at: int
    course_ids: List[int] = Field(default_factory=list)


class CourseResponse(BaseModel):
    id: int
    name: str
    description: str
    teacher: str
    capacity: int
    enrolled_count: int
    active: bool


class GradeResponse(BaseModel):
    id: int
    student_id: int
    course_id: int
    score: int
    remarks: str
    assigned_at: int
    grader: str


class GradeSummaryResponse(BaseModel):
    score: int
    remarks: str
    timestamp: int


class RoleResponse(BaseModel):
    identity: str
    role: str
    is_teacher: bool


class TotalsResponse(BaseModel):
    students: int
    courses: int
    grades: int


class LedgerRestAPI:
    """REST API implementation for the ledger."""

    def __init__(self, service: LedgerService, clock: Callable[[], float] = time.time):
        self._service = service
        self._clock = clock

        self.app = FastAPI(
            title="Registrar Ledger API",
            description="Access-controlled ledger of students, courses, enrollments and grades",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc",
        )
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._register_error_handlers()
        self._setup_routes()

    def _now(self) -> int:
        return int(self._clock())

    def _register_error_handlers(self):

        @self.app.exception_handler(RegistrarError)
        async def registrar_error_handler(request: Request, exc: RegistrarError):
            return JSONResponse(status_code=status_for(exc), content={"error": exc.to_dict()})

        @self.app.exception_handler(RequestValidationError)
        async def validation_error_handler(request: Request, exc: RequestValidationError):
            logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": {"code": InvalidArgument.default_code, "message": "Malformed request"}},
            )

    def _setup_routes(self):
        """Setup API routes."""
        service = self._service
        app = self.app

        @app.get("/", response_model=Dict[str, str])
        def root():
            return {"message": "Registrar Ledger API", "version": __version__, "docs": "/docs"}

        @app.get("/health", response_model=Dict[str, str])
        def health_check():
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        # Roles
        @app.post("/teachers", status_code=status.HTTP_201_CREATED, response_model=RoleResponse)
        def add_teacher(body: TeacherRequest, caller: str = Depends(caller_identity)):
            service.add_teacher(caller, body.identity, self._now())
            return self._role(body.identity)

        @app.delete("/teachers/{identity}", response_model=RoleResponse)
        def remove_teacher(identity: str, caller: str = Depends(caller_identity)):
            service.remove_teacher(caller, identity, self._now())
            return self._role(identity)

        @app.get("/teachers", response_model=List[str])
        def list_teachers():
            return list(service.list_teachers())

        @app.get("/identities/{identity}", response_model=RoleResponse)
        def get_role(identity: str):
            return self._role(identity)

        # Students
        @app.post("/students", status_code=status.HTTP_201_CREATED, response_model=CreatedResponse)
        def register_student(body: StudentCreate, caller: str = Depends(caller_identity)):
            return CreatedResponse(id=service.register_student(caller, body.name, body.age, self._now()))

        @app.get("/students/{student_id}", response_model=StudentResponse)
        def get_student(student_id: int):
            return self._student_to_response(service.get_student(student_id))

        @app.get("/students/{student_id}/course-count", response_model=Dict[str, int])
        def get_student_course_count(student_id: int):
            return {"count": service.get_student_course_count(student_id)}

        @app.get("/students/{student_id}/courses/{course_id}/enrollment", response_model=Dict[str, bool])
        def is_enrolled(student_id: int, course_id: int):
            return {"enrolled": service.is_student_enrolled_in_course(student_id, course_id)}

        @app.get("/students/{student_id}/courses/{course_id}/grade", response_model=GradeSummaryResponse)
        def get_student_grade_for_course(student_id: int, course_id: int):
            score, remarks, timestamp = service.get_student_grade_for_course(student_id, course_id)
            return GradeSummaryResponse(score=score, remarks=remarks, timestamp=timestamp)

        # Courses
        @app.post("/courses", status_code=status.HTTP_201_CREATED, response_model=CreatedResponse)
        def create_course(body: CourseCreate, caller: str = Depends(caller_identity)):
            course_id = service.create_course(
                caller, body.name, body.description, body.teacher, body.capacity, self._now(),
            )
            return CreatedResponse(id=course_id)

        @app.get("/courses/{course_id}", response_model=CourseResponse)
        def get_course(course_id: int):
            return self._course_to_response(service.get_course(course_id))

        @app.get("/courses/{course_id}/roster", response_model=List[int])
        def get_course_roster(course_id: int):
            return list(service.get_course_roster(course_id))

        # Enrollment and grades
        @app.post("/enrollments", status_code=status.HTTP_201_CREATED, response_model=Dict[str, bool])
        def enroll(body: EnrollmentRequest, caller: str = Depends(caller_identity)):
            service.enroll_student_in_course(caller, body.student_id, body.course_id, self._now())
            return {"enrolled": True}

        @app.post("/grades", status_code=status.HTTP_201_CREATED, response_model=CreatedResponse)
        def assign_grade(body: GradeAssign, caller: str = Depends(caller_identity)):
            grade_id = service.assign_grade(
                caller, body.student_id, body.course_id, body.score, body.remarks, self._now(),
            )
            return CreatedResponse(id=grade_id)

        @app.get("/grades/{grade_id}", response_model=GradeResponse)
        def get_grade(grade_id: int):
            return self._grade_to_response(service.get_grade(grade_id))

        # Totals and events
        @app.get("/totals", response_model=TotalsResponse)
        def get_totals():
            return TotalsResponse(
                students=service.get_total_students(),
                courses=service.get_total_courses(),
                grades=service.get_total_grades(),
            )

        @app.get("/events/{stream_id}", response_model=List[Dict])
        def get_events(stream_id: str, from_version: int = 0):
            sink = service.event_sink
            if not isinstance(sink, EventService):
                return []
            return [event.to_dict() for event in sink.get_events(stream_id, from_version)]

    def _role(self, identity: str) -> RoleResponse:
        return RoleResponse(
            identity=identity,
            role=self._service.role_of(identity).value,
            is_teacher=self._service.is_teacher(identity),
        )

    def _student_to_response(self, student: Student) -> StudentResponse:
        return StudentResponse(**student.to_dict())

    def _course_to_response(self, course: Course) -> CourseResponse:
        return CourseResponse(**course.to_dict())

    def _grade_to_response(self, grade: Grade) -> GradeResponse:
        return GradeResponse(**grade.to_dict())
