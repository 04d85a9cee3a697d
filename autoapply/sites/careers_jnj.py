"""Johnson & Johnson careers board backed by a Workday application portal."""
from __future__ import annotations

from autoapply.models import FieldQuery, Section
from autoapply.sites.base import SiteProfile

SAVE_AND_CONTINUE = "Save and Continue"

HOW_HEARD = Section(
    name="how_heard",
    fields=(
        FieldQuery(
            "How Did You Hear About Us",
            ("Company Web Site", "careers.jnj.com"),
            kind="drilldown",
        ),
    ),
    optional=True,
)

PERSONAL_EXPERIENCE = Section(name="personal_experience")

VISA = Section(
    name="visa",
    fields=(
        FieldQuery("Due to the United States", "No"),
        FieldQuery("What is your base salary expectation", "150000", kind="fill"),
        # Some variants render the salary box without an accessible name.
        FieldQuery("", "150000", kind="fill"),
        FieldQuery("Will you now or in the future", "No"),
        FieldQuery("Do you have any agreement", "No"),
        FieldQuery("Indicate your proficiency", "Fluent / Native Speaker"),
        FieldQuery("If applicable, are you", "Yes"),
        FieldQuery("Are you legally authorized", "Yes"),
        FieldQuery("How many years of experience", "10 or more years"),
    ),
)

DISCLOSURES = Section(
    name="disclosures",
    fields=(
        FieldQuery("What is your gender", "Male", kind="choose"),
        FieldQuery("Hispanic or Latino", "No", kind="choose"),
        FieldQuery("Please select your race", "Asian", kind="choose"),
        FieldQuery("Do you identify as a Veteran", "I am not a veteran", kind="choose"),
        FieldQuery("I certify that I have read", kind="check"),
    ),
)

REVIEW_SUBMIT = Section(
    name="review_submit",
    fields=(FieldQuery(SAVE_AND_CONTINUE, kind="click"),),
    proceed="Submit",
    submits=True,
)

SITE = SiteProfile(
    name="careers_jnj",
    base_url="https://www.careers.jnj.com",
    login_url="https://jj.wd5.myworkdayjobs.com/en-US/JJ/login",
    search_path="/en/jobs/",
    page_size=30,
    result_card_selector="a[href*='/en/jobs/r-']",
    already_applied_marker="already applied for",
    sign_in_scope="#mainContent",
    apply_link_name="Apply now",
    reuse_application_button="Use My Last Application",
    embedded_window_close="Close",
    sections=(HOW_HEARD, PERSONAL_EXPERIENCE, VISA, DISCLOSURES, REVIEW_SUBMIT),
)
