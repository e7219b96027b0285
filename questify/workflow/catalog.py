"""
Domain catalogue: what the user can pick at each step.
"""

from typing import List, Optional

from questify.generation.schemas import BASE_QUESTION_TYPES, PROGRAMMING_CODES, Domain

SCHOOL_CLASSES = [f"Class {n}" for n in range(6, 13)]

COLLEGE_COURSES = ["B.Tech", "B.Sc", "B.Com", "BA", "M.Tech", "M.Sc", "MBA"]

COURSE_SUBJECTS = {
    "B.Tech": ["Computer Science", "Electrical Engineering", "Mechanical Engineering",
               "Civil Engineering", "Electronics & Communication"],
    "B.Sc": ["Physics", "Chemistry", "Mathematics", "Biology", "Computer Science"],
    "B.Com": ["Accounting", "Finance", "Business Law", "Economics", "Taxation"],
    "BA": ["History", "Political Science", "Sociology", "Psychology", "English Literature"],
    "M.Tech": ["Advanced Data Structures", "VLSI Design", "Structural Engineering", "Thermal Engineering"],
    "M.Sc": ["Quantum Physics", "Organic Chemistry", "Real Analysis", "Microbiology"],
    "MBA": ["Marketing Management", "Financial Management", "Human Resource Management",
            "Operations Management"],
}

EXAMS = ["NEET", "JEE Main", "JEE Advanced", "UPSC", "SSC", "Banking", "Custom"]


def sub_domain_options(domain: Domain) -> List[str]:
    """Classes, courses or exams for a domain."""
    domain = Domain(domain)
    if domain is Domain.SCHOOL:
        return list(SCHOOL_CLASSES)
    if domain is Domain.COLLEGE:
        return list(COLLEGE_COURSES)
    return list(EXAMS)


def subject_options(course: str) -> List[str]:
    return list(COURSE_SUBJECTS.get(course, []))


def is_computer_subject(sub_domain: str, subject: Optional[str]) -> bool:
    return "computer" in (subject or "").lower() or "computer" in (sub_domain or "").lower()


def available_question_types(sub_domain: str, subject: Optional[str]) -> List[str]:
    """Programming codes is only offered for computer subjects."""
    types = list(BASE_QUESTION_TYPES)
    if is_computer_subject(sub_domain, subject):
        types.append(PROGRAMMING_CODES)
    return types
