import csv
from io import BytesIO, StringIO
from typing import List
from urllib.parse import quote

from fastapi.responses import StreamingResponse
from openpyxl import Workbook # type: ignore
from openpyxl.utils import get_column_letter # type: ignore

from app.schemas.settlement_schema import PeriodSettlement, StudentSettlement

HEADERS = ["学生姓名", "年级", "总课时", "总费用", "详情(科目/单价/课本费)"]


def _num(value: float):
    # 2.0 -> 2, 2.5 -> 2.5
    return int(value) if float(value).is_integer() else value


def item_details(settlement: StudentSettlement) -> str:
    """Chuỗi chi tiết các môn, ví dụ: math(2课时*¥76+¥0); physics(...)"""
    return "; ".join(
        f"{item.subject.value}({_num(item.total_hours)}课时*¥{_num(item.price_per_hour)}+¥{_num(item.material_fee_total)})"
        for item in settlement.items
    )


def settlement_rows(period: PeriodSettlement) -> List[list]:
    return [
        [
            s.student.name,
            s.student.grade,
            _num(s.total_hours),
            _num(s.total_amount),
            item_details(s),
        ]
        for s in period.settlements
    ]


def export_filename(period: PeriodSettlement, extension: str) -> str:
    return f"课程结算_{period.year}年{period.month}月.{extension}"


def _attachment_headers(filename: str) -> dict:
    return {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}


def export_settlement_csv(period: PeriodSettlement) -> StreamingResponse:
    """
    Xuất quyết toán tháng ra CSV (UTF-8 có BOM để Excel đọc đúng tiếng Trung).
    """
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADERS)
    writer.writerows(settlement_rows(period))
    content = "\ufeff" + buffer.getvalue()

    return StreamingResponse(
        iter([content.encode("utf-8")]),
        media_type="text/csv; charset=utf-8",
        headers=_attachment_headers(export_filename(period, "csv")),
    )


def export_settlement_excel(period: PeriodSettlement) -> StreamingResponse:
    """
    Xuất quyết toán tháng ra Excel:
    - A1: kỳ quyết toán, C1: bảng giá
    - Dòng 3: header
    - Dòng cuối: tổng doanh thu
    """
    wb = Workbook()
    ws = wb.active
    ws.title = period.period

    ws["A1"] = f"Period: {period.period}"
    ws["C1"] = f"Price rule: {period.rule_name}"

    for col, header in enumerate(HEADERS, start=1):
        ws.cell(row=3, column=col, value=header)

    rows = settlement_rows(period)
    for idx, row in enumerate(rows, start=1):
        for col, value in enumerate(row, start=1):
            ws.cell(row=3 + idx, column=col, value=value)

    total_row = 3 + len(rows) + 1
    ws.cell(row=total_row, column=3, value="Total")
    ws.cell(row=total_row, column=4, value=_num(period.total_revenue))

    # Độ rộng cột
    for col in range(1, len(HEADERS) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 40 if col == len(HEADERS) else 14

    output = BytesIO()
    wb.save(output)
    output.seek(0)

    return StreamingResponse(
        output,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers=_attachment_headers(export_filename(period, "xlsx")),
    )
