"""
Email Templates
===============

HTML bodies for department and system emails. Values are interpolated
as-is; record content is not escaped.

Version: 0.1.0
"""

import re
from collections.abc import Sequence
from datetime import datetime

from shared.models.department import DepartmentStat
from shared.models.regulation import Regulation


FOOTER = "ComplianceGuard - AI 기반 법규 준수 모니터링 플랫폼"


def _korean_datetime(now: datetime) -> str:
    return now.strftime("%Y. %m. %d. %H:%M:%S")


def html_to_text(html: str) -> str:
    """Strip tags and collapse whitespace for plain-text previews."""
    text = re.sub(r"<[^>]*>", "", html)
    text = text.replace("&nbsp;", " ")
    return re.sub(r"\s+", " ", text).strip()


def monthly_subject(department: str, month: int) -> str:
    return f"📋 {department} {month}월 시행 예정 법규 안내"


def _regulation_card(regulation: Regulation) -> str:
    summary = ""
    if regulation.has_ai_summary:
        summary = f"""
        <div style="background: #dbeafe; padding: 15px; border-radius: 6px; margin-bottom: 15px;">
          <p style="margin: 0 0 8px 0; font-weight: 600; color: #1e40af;">💡 AI 주요 개정 정리</p>
          <div style="color: #1e40af; white-space: pre-line; font-size: 14px;">{regulation.ai_summary}</div>
        </div>"""

    follow_up = ""
    if regulation.has_follow_up:
        follow_up = f"""
        <div style="background: #dcfce7; padding: 15px; border-radius: 6px;">
          <p style="margin: 0 0 8px 0; font-weight: 600; color: #15803d;">📋 AI 후속 조치 사항</p>
          <div style="color: #15803d; white-space: pre-line; font-size: 14px;">{regulation.ai_follow_up}</div>
        </div>"""

    return f"""
      <div style="border: 1px solid #e5e7eb; border-radius: 8px; padding: 20px; margin-bottom: 15px; background: #f9fafb;">
        <h3 style="margin: 0 0 10px 0; color: #111827; font-size: 16px;">
          {regulation.name}
          <span style="background: #dbeafe; color: #1e40af; padding: 4px 8px; border-radius: 4px; font-size: 12px; margin-left: 10px;">{regulation.law_type}</span>
        </h3>
        <p style="font-size: 14px; margin: 0 0 15px 0;">
          <span style="color: #6b7280;">시행일자:</span> <strong>{regulation.effective_date}</strong>
          &nbsp;|&nbsp;
          <span style="color: #6b7280;">구분:</span> <strong>{regulation.enactment_type or '-'}</strong>
        </p>{summary}{follow_up}
      </div>"""


def render_monthly_department_email(
    department: str,
    stat: DepartmentStat,
    regulations: Sequence[Regulation],
    now: datetime,
    contact_address: str = "",
) -> str:
    """
    Monthly status email for one department.

    Args:
        department: Department name as written in the spreadsheet
        stat: The department's aggregate for `now`
        regulations: The department's regulations taking effect this month
        now: Send time; supplies month and timestamps
        contact_address: Address shown in the "contact" footer
    """
    cards = "".join(_regulation_card(r) for r in regulations)

    return f"""
<div style="font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; line-height: 1.6;">
  <div style="background: #2563eb; color: white; padding: 20px; border-radius: 8px 8px 0 0;">
    <h1 style="margin: 0; font-size: 24px;">📋 {department}</h1>
    <p style="margin: 10px 0 0 0;">{now.month}월 시행 예정 법규 안내 | 총 {len(regulations)}건</p>
  </div>

  <div style="background: white; padding: 30px; border: 1px solid #e5e7eb; border-top: none;">
    <div style="background: #dbeafe; padding: 20px; border-radius: 8px; margin-bottom: 20px; border-left: 4px solid #3b82f6;">
      <h2 style="margin: 0 0 10px 0; color: #1e40af; font-size: 18px;">📊 {now.year}년 {now.month}월 현황</h2>
      <p style="margin: 5px 0;"><strong>담당 법규:</strong> {stat.total}건</p>
      <p style="margin: 5px 0;"><strong>{now.month}월 시행 예정:</strong> {stat.current_month_due}건</p>
      <p style="margin: 5px 0;"><strong>{now.year}년 시행 예정:</strong> {stat.yearly_due}건</p>
      <p style="margin: 5px 0;"><strong>진행률:</strong> {stat.progress_percentage}% ({stat.completed_to_date}/{stat.yearly_due})</p>
      <p style="margin: 5px 0;"><strong>발송일:</strong> {now.strftime("%Y. %m. %d.")}</p>
    </div>

    <h2 style="color: #374151; margin-bottom: 20px;">📋 시행 예정 법규 상세 내용</h2>
    {cards}

    <div style="margin-top: 30px; padding: 20px; background: #f8fafc; border-radius: 8px; border: 1px solid #e2e8f0;">
      <h3 style="margin: 0 0 15px 0; color: #374151;">📞 문의 및 지원</h3>
      <p style="margin: 0; color: #6b7280; font-size: 14px;">
        • 상세한 법규 내용은 ComplianceGuard 시스템에서 확인 가능합니다<br>
        • 법규 준수 관련 문의: 법무팀 ({contact_address})
      </p>
    </div>
  </div>

  <div style="background: #374151; color: white; padding: 15px; text-align: center; border-radius: 0 0 8px 8px;">
    <small>{FOOTER} | 발송시간: {_korean_datetime(now)}</small>
  </div>
</div>
"""


def render_test_email(now: datetime) -> str:
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #2563eb;">📧 이메일 시스템 테스트</h2>
  <p>이 이메일은 ComplianceGuard 시스템의 이메일 전송 테스트용입니다.</p>
  <p><strong>발송 시간:</strong> {_korean_datetime(now)}</p>
  <p>이메일이 정상적으로 수신되었다면 시스템이 올바르게 작동하고 있습니다.</p>
  <hr>
  <small>{FOOTER}</small>
</div>
"""


def render_regulation_reminder(regulation: Regulation, days_remaining: int) -> str:
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #f59e0b;">법규 시행 알림</h2>
  <p><strong>법규명:</strong> {regulation.name}</p>
  <p><strong>시행일:</strong> {regulation.effective_date}</p>
  <p><strong>담당부서:</strong> {regulation.department}</p>
  <p><strong>남은 기간:</strong> {days_remaining}일</p>
  <div style="background: #fef3c7; padding: 15px; border-radius: 8px; margin: 20px 0;">
    <p style="margin: 0; font-weight: bold;">준비사항을 점검하시기 바랍니다.</p>
  </div>
</div>
"""
