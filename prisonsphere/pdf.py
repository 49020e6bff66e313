"""PDF rendering of inmate reports."""

import datetime
import io
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

PDF_TYPES = {
    "information": "Inmate Information Report",
    "rehabilitation": "Rehabilitation Status Report",
}


def build_table(data: list[list[Any]], col_widths=None, header: bool = True) -> Table:
    """Build a grid table, shading the header row."""
    table = Table(
        [[str(cell) if cell is not None else "" for cell in row] for row in data],
        colWidths=col_widths,
    )

    style_commands = [
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#CCCCCC")),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]
    if header:
        style_commands.extend(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2F3E4E")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ]
        )
    table.setStyle(TableStyle(style_commands))
    return table


def profile_rows(inmate: dict[str, Any]) -> list[list[Any]]:
    """Key/value rows describing an inmate."""
    return [
        ["Field", "Value"],
        ["Inmate ID", inmate.get("inmateID")],
        ["Name", f"{inmate.get('firstName')} {inmate.get('lastName')}"],
        ["Date of Birth", inmate.get("dateOfBirth")],
        ["Gender", inmate.get("gender")],
        ["Admission Date", inmate.get("admissionDate")],
        ["Release Date", inmate.get("releaseDate")],
        ["Sentence (months)", inmate.get("sentenceDuration")],
        ["Assigned Cell", inmate.get("assignedCell")],
        ["Status", inmate.get("status")],
        ["Crime Details", inmate.get("crimeDetails")],
    ]


def information_story(details: dict[str, Any], styles) -> list:
    """Flowables of the inmate information report."""
    story = [
        Paragraph("Profile", styles["Heading2"]),
        build_table(profile_rows(details["inmate"]), col_widths=[1.8 * inch, 4.5 * inch]),
        Spacer(1, 0.2 * inch),
        Paragraph("Recent Activities", styles["Heading2"]),
    ]
    activities = details.get("activityLogs", [])
    if activities:
        rows = [["Date", "Type", "Description"]]
        rows += [
            [log["logDate"][:10], log["activityType"], log["description"]]
            for log in activities
        ]
        story.append(build_table(rows, col_widths=[1.1 * inch, 1.3 * inch, 3.9 * inch]))
    else:
        story.append(Paragraph("No activities recorded.", styles["Normal"]))
    return story


def rehabilitation_story(details: dict[str, Any], styles) -> list:
    """Flowables of the rehabilitation status report."""
    inmate = details["inmate"]
    evaluation = details["evaluation"]
    story = [
        Paragraph(
            escape(
                f"{inmate['firstName']} {inmate['lastName']} ({inmate['inmateID']})"
            ),
            styles["Heading2"],
        ),
        build_table(
            [
                ["Metric", "Value"],
                ["Average Work Ethic", evaluation["workEthicAvg"]],
                ["Average Cooperation", evaluation["cooperationAvg"]],
                ["Average Social Skills", evaluation["socialSkillsAvg"]],
                ["Total Incident Severity", evaluation["incidentCount"]],
                ["Rehabilitation Score", f"{evaluation['score']}%"],
                ["Status", evaluation["status"]],
            ],
            col_widths=[2.5 * inch, 3.8 * inch],
        ),
        Spacer(1, 0.2 * inch),
        Paragraph("Work Programs", styles["Heading2"]),
    ]
    programs = details.get("workPrograms", [])
    if programs:
        rows = [["Program", "Status", "Start", "End", "Rating"]]
        rows += [
            [
                program["name"],
                program["status"],
                program["startDate"],
                program["endDate"],
                program["performanceRating"],
            ]
            for program in programs
        ]
        story.append(build_table(rows))
    else:
        story.append(Paragraph("No work program enrollments.", styles["Normal"]))
    return story


def render(details: dict[str, Any], pdf_type: str) -> bytes:
    """Render collected report details as a PDF document."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        rightMargin=50,
        leftMargin=50,
        topMargin=50,
        bottomMargin=50,
        title=PDF_TYPES[pdf_type],
    )
    styles = getSampleStyleSheet()

    story = [
        Paragraph("PrisonSphere", styles["Title"]),
        Paragraph(PDF_TYPES[pdf_type], styles["Heading1"]),
        Paragraph(
            f"Generated {datetime.datetime.now():%B %d, %Y %H:%M}", styles["Normal"]
        ),
        Spacer(1, 0.3 * inch),
    ]
    if pdf_type == "information":
        story += information_story(details, styles)
    else:
        story += rehabilitation_story(details, styles)

    doc.build(story)
    return buffer.getvalue()
