from __future__ import annotations

from competency_hub.domain.models import Role

COMPETENCY_DEFINITIONS = [
    {"id": "1", "name": "Communication", "domain": "Interpersonal"},
    {"id": "2", "name": "Problem Solving", "domain": "Cognitive"},
    {"id": "3", "name": "Leadership", "domain": "Management"},
    {"id": "4", "name": "Technical Skills", "domain": "Technical"},
    {"id": "5", "name": "Teamwork", "domain": "Interpersonal"},
]

PUBLIC_PATHS = frozenset({"/", "/signin", "/signup", "/unauthorized"})


def _section(name: str, *items: tuple[str, str]) -> dict[str, object]:
    return {
        "name": name,
        "sub_items": [{"name": item_name, "path": path} for item_name, path in items],
    }


EMPLOYEE_NAVIGATION = [
    {"name": "Page Description", "path": "/page-description"},
    _section(
        "User & Role Management",
        ("Employee Details", "/employee-details"),
        ("Employee Job Assignment", "/employee-job-assignment"),
        ("Employee Assessor Assign", "/employee-assessor-assign"),
    ),
    _section(
        "Competency Framework",
        ("Competency Description", "/competency-description"),
        ("Competency Category", "/competency-category"),
        ("Competency", "/competency"),
        ("Competency Domain", "/competency-domain"),
        ("Competency Proficiency", "/proficiency-description"),
    ),
    _section(
        "Job Profiling",
        ("Job", "/job"),
        ("Job Competency Profile", "/job-competency-profile"),
    ),
    _section("Assessment Mgt", ("Employee Assessment", "/employee-assessment")),
    _section("Analytics", ("Individual Gap", "/individual-gap")),
]

ASSESSOR_NAVIGATION = [
    {"name": "Page Description", "path": "/assessor/page-description"},
    _section(
        "User & Role Management",
        ("Employee Details", "/assessor/employee-details"),
        ("Employee Job Assignment", "/assessor/employee-job-assignment"),
        ("Employee Assessor Assign", "/assessor/employee-assessor-assign"),
    ),
    _section(
        "Competency Framework",
        ("Competency Description", "/assessor/competency-description"),
        ("Competency Category", "/assessor/competency-category"),
        ("Competency", "/assessor/competency"),
        ("Competency Domain", "/assessor/competency-domain"),
        ("Competency Proficiency", "/assessor/proficiency-description"),
    ),
    _section(
        "Job Profiling",
        ("Job", "/assessor/job"),
        ("Job Competency Profile", "/assessor/job-competency-profile"),
    ),
    _section("Assessment Mgt", ("Assessor Assessment", "/assessor/assessment")),
    _section("Analytics", ("Individual Gap", "/assessor/individual-gap")),
]

HR_NAVIGATION = [
    {"name": "Page Description", "path": "/hr/page-description"},
    _section(
        "User & Role Management",
        ("Employee Details", "/hr/employee-details"),
        ("Assign Job Roles", "/hr/employee-job-assignment"),
        ("Assign an Assessor", "/hr/employee-assessor-assign"),
        ("Role Management", "/hr/role-management"),
    ),
    _section(
        "Competency Framework",
        ("Competency Description", "/hr/competency-description"),
        ("Competency Category", "/hr/competency-category"),
        ("Competency", "/hr/competency"),
        ("Competency Domain", "/hr/competency-domain"),
        ("Competency Proficiency", "/hr/competency-proficiency"),
    ),
    _section(
        "Job Profiling",
        ("Job", "/hr/job"),
        ("Job Competency Profile", "/hr/job-competency-profile"),
    ),
    _section(
        "Assessment Mgt",
        ("Assessor Assessment", "/hr/assessor-assessment"),
        ("Consensus Assessment", "/hr/consensus-assessment"),
    ),
    _section("Analytics", ("Organization Gap", "/hr/organization-gap")),
]

NAVIGATION_TREES: dict[Role, list[dict[str, object]]] = {
    Role.EMPLOYEE: EMPLOYEE_NAVIGATION,
    Role.ASSESSOR: ASSESSOR_NAVIGATION,
    Role.HR: HR_NAVIGATION,
}
