from django.urls import path

from mch_care.schedules.api.views import (
    CompletionView,
    RetryCompletionView,
    ScheduleDetailView,
    ScheduleListView,
    SubjectCompletionsView,
    SubjectSyncView,
    SubjectTimelineView,
)

app_name = "api"
urlpatterns = [
    path("schedules/", ScheduleListView.as_view(), name="schedule_list"),
    path("schedules/<str:domain>/", ScheduleDetailView.as_view(), name="schedule_detail"),
    path("subjects/<str:subject_id>/completions/", SubjectCompletionsView.as_view(), name="subject_completions"),
    path("subjects/<str:subject_id>/sync/", SubjectSyncView.as_view(), name="subject_sync"),
    path("subjects/<str:subject_id>/<str:domain>/timeline/", SubjectTimelineView.as_view(), name="timeline"),
    path(
        "subjects/<str:subject_id>/<str:domain>/completions/<str:milestone_id>/",
        CompletionView.as_view(),
        name="completion",
    ),
    path(
        "subjects/<str:subject_id>/<str:domain>/completions/<str:milestone_id>/retry/",
        RetryCompletionView.as_view(),
        name="completion_retry",
    ),
]
