import html
import logging
from typing import List

from botocore.client import BaseClient
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse

from text_files_api.config.settings import IndexPage, Settings
from text_files_api.dependencies import get_s3_client, get_settings_from_app
from text_files_api.errors import STORE_EXCEPTIONS
from text_files_api.s3.read_objects import list_s3_object_keys

logger = logging.getLogger(__name__)

router = APIRouter()

UPLOAD_SCRIPT = """
    <script>
        const form = document.getElementById('uploadForm');
        form.addEventListener('submit', async (event) => {
            event.preventDefault();
            const text = document.getElementById('text').value;
            const tagsInput = document.getElementById('tags');
            const body = { text };
            if (tagsInput && tagsInput.value.trim()) {
                body.tags = tagsInput.value.split(',').map(t => t.trim()).filter(t => t);
            }
            const response = await fetch('/files', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(body)
            });
            if (response.ok) {
                alert('File uploaded successfully!');
                location.reload();
            } else {
                alert('Failed to upload file.');
            }
        });
    </script>
"""

LANDING_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Text Files</title>
</head>
<body>
    <h1>Text Files</h1>
    <form id="uploadForm" action="/files" method="POST">
        <textarea name="text" id="text" cols="30" rows="10" placeholder="Enter file content"></textarea><br>
        <input type="text" name="tags" id="tags" placeholder="Tags, comma separated"><br>
        <button type="submit">Upload File</button>
    </form>
    <h2>Files</h2>
    <ul id="files"></ul>
    <script>
        fetch('/files')
            .then(response => response.json())
            .then(data => {
                const list = document.getElementById('files');
                for (const entry of data.files) {
                    const item = document.createElement('li');
                    item.textContent = typeof entry === 'string'
                        ? entry
                        : entry.filename + (entry.tags.length ? ' [' + entry.tags.join(', ') + ']' : '');
                    list.appendChild(item);
                }
            });
    </script>
""" + UPLOAD_SCRIPT + """
</body>
</html>
"""


def render_listing_page(filenames: List[str]) -> str:
    """HTML page with an upload form and the current bucket contents."""
    items = "".join(f"<li>{html.escape(name)}</li>" for name in filenames)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>S3 File Manager</title>
</head>
<body>
    <h1>S3 File Manager</h1>
    <form id="uploadForm" action="/files" method="POST">
        <textarea name="text" id="text" cols="30" rows="10" placeholder="Enter file content"></textarea><br>
        <button type="submit">Upload File</button>
    </form>
    <h2>Files in Bucket:</h2>
    <ul>{items}</ul>
{UPLOAD_SCRIPT}
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(
    settings: Settings = Depends(get_settings_from_app),
    s3_client: BaseClient = Depends(get_s3_client),
):
    """Landing page, or a generated bucket listing when `index_page` is `listing`."""
    if settings.index_page == IndexPage.STATIC:
        return HTMLResponse(LANDING_PAGE)

    try:
        filenames = list_s3_object_keys(settings.s3_bucket_name, s3_client=s3_client)
    except STORE_EXCEPTIONS as e:
        logger.error(f"Error generating HTML page: {e}")
        return PlainTextResponse("Error generating HTML page.", status_code=500)

    return HTMLResponse(render_listing_page(filenames))
