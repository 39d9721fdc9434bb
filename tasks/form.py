"""Fill and submit a locally generated contact form."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

from playwright.async_api import Page

from runner.actions import PageActions
from runner.logger import log

FORM_FILENAME = "demo-form.html"
SUCCESS_TEXT = "Thank you for your submission!"

FORM_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Playwright MCP Demo Form</title>
  <style>
    body { font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; }
    .form-group { margin-bottom: 15px; }
    label { display: block; margin-bottom: 5px; font-weight: bold; }
    input, select { width: 100%; padding: 8px; border: 1px solid #ddd; border-radius: 4px; }
    .checkbox-group { display: flex; align-items: center; }
    .checkbox-group input { width: auto; margin-right: 10px; }
    button { background-color: #4CAF50; color: white; padding: 10px 15px; border: none; border-radius: 4px; cursor: pointer; }
    .success-message { display: none; background-color: #dff0d8; color: #3c763d; padding: 15px; border-radius: 4px; margin-top: 20px; }
  </style>
</head>
<body>
  <h1>Contact Information Form</h1>
  <form id="contactForm">
    <div class="form-group">
      <label for="name">Full Name:</label>
      <input type="text" id="name" name="name" required>
    </div>
    <div class="form-group">
      <label for="email">Email Address:</label>
      <input type="email" id="email" name="email" required>
    </div>
    <div class="form-group">
      <label for="country">Country:</label>
      <select id="country" name="country">
        <option value="">-- Select Country --</option>
        <option value="us">United States</option>
        <option value="ca">Canada</option>
        <option value="uk">United Kingdom</option>
        <option value="au">Australia</option>
      </select>
    </div>
    <div class="form-group checkbox-group">
      <input type="checkbox" id="agree" name="agree" required>
      <label for="agree">I agree to the terms and conditions</label>
    </div>
    <button type="submit">Submit Form</button>
  </form>
  <div id="successMessage" class="success-message">
    <h2>Thank you for your submission!</h2>
    <p>We have received your information and will contact you soon.</p>
  </div>
  <script>
    document.getElementById('contactForm').addEventListener('submit', function(e) {
      e.preventDefault();
      this.style.display = 'none';
      document.getElementById('successMessage').style.display = 'block';
    });
  </script>
</body>
</html>
"""

FORM_VALUES = {
    "name": "Jane Doe",
    "email": "jane.doe@example.com",
    "country": "ca",
}


def write_demo_form(path: str) -> str:
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(FORM_HTML)
    log("INFO", "form_created", f"Created demo form at {path}")
    return path


def remove_demo_form(path: str) -> bool:
    """Delete the generated form. Failures are logged, never raised."""
    try:
        os.remove(path)
    except OSError as e:
        log("ERROR", "form_cleanup_err", "Error cleaning up demo form", path=path, error=str(e))
        return False
    log("INFO", "form_cleaned", "Cleaned up demo form file", path=path)
    return True


async def form_demo(page: Page) -> Dict[str, Any]:
    actions = PageActions(page, "form")
    form_path = write_demo_form(actions.path_for(FORM_FILENAME))
    try:
        await actions.navigate(Path(form_path).resolve().as_uri())
        title = await actions.title()

        await actions.fill(page.get_by_label("Full Name:"), FORM_VALUES["name"], "name")
        await actions.fill(page.get_by_label("Email Address:"), FORM_VALUES["email"], "email")
        await actions.select("select#country", FORM_VALUES["country"])
        await actions.check(page.get_by_label("I agree to the terms and conditions"), "agreement")
        await actions.screenshot("filled-form.png")

        await actions.click(page.get_by_role("button", name="Submit Form"), "submit button")
        await page.wait_for_timeout(1000)

        submitted = await page.get_by_text(SUCCESS_TEXT).is_visible()
        if submitted:
            log("INFO", "form_submitted", "Form submission successful", task=actions.task_name)
            await actions.screenshot("form-submitted.png")
        else:
            log("WARN", "form_unconfirmed", "Form submitted, but success message not found", task=actions.task_name)
        return {"title": title, "submitted": submitted}
    finally:
        remove_demo_form(form_path)
