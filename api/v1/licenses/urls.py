"""
URL configuration for license endpoints.

Paths are mounted at the site root to keep the bot-facing contract.
"""

from django.urls import path

from api.v1.licenses import views

urlpatterns = [
    path("verify", views.VerifyLicenseView.as_view(), name="verify-license"),
    path("admin/create", views.IssueLicenseView.as_view(), name="issue-license"),
    path("trial/create", views.IssueTrialView.as_view(), name="issue-trial"),
    path("trials/active", views.ListActiveTrialsView.as_view(), name="list-active-trials"),
    path("licenses", views.ListLicensesView.as_view(), name="list-licenses"),
    path("license/suspend", views.SuspendLicenseView.as_view(), name="suspend-license"),
    path("license/renew", views.RenewLicenseView.as_view(), name="renew-license"),
]
