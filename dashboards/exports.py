"""
Report Export Views

Excel and PDF downloads for the reports screens:
- RSBSA masterlist (Excel)
- Distribution records of a season (Excel, PDF)

Every export is written to the audit trail.
"""

import io
import logging

from django.conf import settings
from django.http import HttpResponse
from django.utils import timezone
from django.utils.html import escape
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from accounts.permissions import IsOfficeStaff
from audit.models import AuditAction, AuditModule
from audit.services import log_audit
from distribution.models import DistributionRecord
from distribution.seasons import season_label
from rsbsa.models import RSBSASubmission

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
HEADER_COLOR = '2E7D32'

MASTERLIST_HEADERS = [
    'FFRS Code', 'Last Name', 'First Name', 'Middle Name', 'Ext', 'Gender', 'Birthdate',
    'Barangay', 'Farm Location', 'Parcel Area (ha)', 'Total Farm Area (ha)',
    'Ownership', 'Activities', 'Status',
]

RECORD_HEADERS = [
    'Farmer', 'Barangay', 'Farm Area (ha)', 'Date', 'Fertilizer', 'Bags',
    'Seeds', 'Seed (kg)', 'Voucher', 'Signed', 'Verified By',
]


def _ownership(submission):
    if submission.ownership_type_registered_owner:
        return 'Registered Owner'
    if submission.ownership_type_tenant:
        return 'Tenant'
    if submission.ownership_type_lessee:
        return 'Lessee'
    return ''


def _activities(submission):
    activities = []
    if submission.farmer_rice:
        activities.append('Rice')
    if submission.farmer_corn:
        activities.append('Corn')
    if submission.farmer_other_crops:
        activities.append(submission.farmer_other_crops_text or 'Other Crops')
    if submission.farmer_livestock:
        activities.append(submission.farmer_livestock_text or 'Livestock')
    if submission.farmer_poultry:
        activities.append(submission.farmer_poultry_text or 'Poultry')
    return ', '.join(activities)


def record_rows(records):
    """Table rows for distribution records, in RECORD_HEADERS order."""
    return [
        [
            record.request.farmer_name,
            record.request.barangay,
            float(record.request.farm_area_ha),
            timezone.localtime(record.distribution_date).strftime('%Y-%m-%d'),
            record.fertilizer_type,
            record.fertilizer_bags_given,
            record.seed_type,
            float(record.seed_kg_given),
            record.voucher_code,
            'Yes' if record.farmer_signature else 'No',
            record.verified_by,
        ]
        for record in records
    ]


class BaseExportView(APIView):
    """Base class for export views"""
    permission_classes = [IsAuthenticated, IsOfficeStaff]

    def build_workbook(self, title, subtitle, headers, rows):
        """Single-sheet workbook with a title block and a styled header row."""
        wb = Workbook()
        ws = wb.active
        ws.title = title[:31]

        header_font = Font(bold=True, color='FFFFFF')
        header_fill = PatternFill(start_color=HEADER_COLOR, end_color=HEADER_COLOR, fill_type='solid')
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(headers))
        ws['A1'] = title
        ws['A1'].font = Font(bold=True, size=14)
        ws['A2'] = subtitle

        header_row = 4
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=header_row, column=col, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.border = thin_border
            cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)

        for row_idx, row in enumerate(rows, header_row + 1):
            for col, value in enumerate(row, 1):
                ws.cell(row=row_idx, column=col, value=value).border = thin_border

        for col, header in enumerate(headers, 1):
            width = max([len(str(header))] + [len(str(row[col - 1] or '')) for row in rows])
            ws.column_dimensions[get_column_letter(col)].width = min(width + 2, 50)

        return wb

    def xlsx_response(self, wb, filename):
        output = io.BytesIO()
        wb.save(output)
        output.seek(0)

        response = HttpResponse(output.read(), content_type=XLSX_CONTENT_TYPE)
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response

    def audit_export(self, request, module, description, metadata):
        log_audit(
            AuditAction.EXPORT,
            module,
            description,
            request=request,
            metadata=metadata,
        )

    def season_records(self, season):
        return (
            DistributionRecord.objects.filter(request__season=season)
            .select_related('request')
            .order_by('request__barangay', 'request__farmer_name')
        )


class RSBSAMasterlistExcelView(BaseExportView):
    """
    GET /api/dashboards/exports/masterlist/
    Query params: barangay, status
    """

    def get(self, request):
        submissions = RSBSASubmission.objects.all()
        barangay = request.query_params.get('barangay')
        status_filter = request.query_params.get('status')
        if barangay:
            submissions = submissions.filter(barangay=barangay)
        if status_filter:
            submissions = submissions.filter(status=status_filter)

        rows = [
            [
                s.ffrs_code or '',
                s.last_name,
                s.first_name,
                s.middle_name,
                s.ext_name,
                s.gender,
                s.birthdate.isoformat() if s.birthdate else '',
                s.barangay,
                s.farm_location,
                s.parcel_area,
                float(s.total_farm_area),
                _ownership(s),
                _activities(s),
                s.status,
            ]
            for s in submissions.order_by('barangay', 'last_name', 'first_name')
        ]

        generated = timezone.localtime().strftime('%Y-%m-%d %H:%M')
        wb = self.build_workbook(
            f"RSBSA Masterlist - {settings.MUNICIPALITY_NAME}",
            f"{len(rows)} farmer(s) | Generated: {generated}",
            MASTERLIST_HEADERS,
            rows,
        )

        self.audit_export(
            request,
            AuditModule.RSBSA,
            f"Exported RSBSA masterlist ({len(rows)} records)",
            {'format': 'xlsx', 'barangay': barangay, 'status': status_filter},
        )
        logger.info(f"RSBSA masterlist exported by {request.user.username}: {len(rows)} rows")

        filename = f"rsbsa_masterlist_{timezone.localdate():%Y%m%d}.xlsx"
        return self.xlsx_response(wb, filename)


class SeasonRecordsExcelView(BaseExportView):
    """GET /api/dashboards/exports/records/{season}/excel/"""

    def get(self, request, season):
        rows = record_rows(self.season_records(season))
        generated = timezone.localtime().strftime('%Y-%m-%d %H:%M')
        wb = self.build_workbook(
            f"Distribution Records - {season_label(season)}",
            f"{settings.MUNICIPALITY_NAME} | {len(rows)} record(s) | Generated: {generated}",
            RECORD_HEADERS,
            rows,
        )

        self.audit_export(
            request,
            AuditModule.REPORTS,
            f"Exported distribution records for {season} ({len(rows)} records)",
            {'format': 'xlsx', 'season': season},
        )

        return self.xlsx_response(wb, f"distribution_records_{season}.xlsx")


class SeasonRecordsPDFView(BaseExportView):
    """GET /api/dashboards/exports/records/{season}/pdf/"""

    def get(self, request, season):
        rows = record_rows(self.season_records(season))

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=landscape(A4),
            rightMargin=1*cm,
            leftMargin=1*cm,
            topMargin=1.5*cm,
            bottomMargin=1.5*cm
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            'ReportTitle',
            parent=styles['Heading1'],
            fontSize=16,
            alignment=TA_CENTER,
            spaceAfter=6
        )
        subtitle_style = ParagraphStyle(
            'ReportSubtitle',
            parent=styles['Normal'],
            fontSize=10,
            alignment=TA_CENTER
        )
        cell_style = ParagraphStyle('Cell', parent=styles['Normal'], fontSize=8, leading=10)

        elements = [
            Paragraph(f"Distribution Records - {season_label(season)}", title_style),
            Paragraph(
                f"Municipal Agriculture Office of {settings.MUNICIPALITY_NAME} | "
                f"Generated: {timezone.localtime():%Y-%m-%d %H:%M}",
                subtitle_style
            ),
            Spacer(1, 12),
        ]

        if rows:
            # Breakdown strings wrap; everything else fits on one line
            data = [RECORD_HEADERS] + [
                [
                    Paragraph(escape(str(value)), cell_style) if idx in (0, 4, 6) else value
                    for idx, value in enumerate(row)
                ]
                for row in rows
            ]
            table = Table(
                data,
                colWidths=[4*cm, 2.6*cm, 1.8*cm, 2*cm, 4.5*cm, 1.2*cm, 4.5*cm, 1.6*cm, 2*cm, 1.2*cm, 2.4*cm],
                repeatRows=1
            )
            table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#2E7D32')),
                ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTSIZE', (0, 0), (-1, -1), 8),
                ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
                ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
                ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F1F8E9')]),
            ]))
            elements.append(table)
        else:
            elements.append(Paragraph("No distribution records for this season.", styles['Normal']))

        doc.build(elements)
        buffer.seek(0)

        self.audit_export(
            request,
            AuditModule.REPORTS,
            f"Exported distribution records for {season} as PDF ({len(rows)} records)",
            {'format': 'pdf', 'season': season},
        )

        response = HttpResponse(buffer.read(), content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="distribution_records_{season}.pdf"'
        return response
