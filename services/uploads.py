"""Product image files kept on local disk and served under ``/uploads``."""
import os
import uuid

from flask import current_app
from flask_babel import gettext as _
from werkzeug.utils import secure_filename

from services import system_log
from services.errors import ValidationError, NotFound


def upload_folder():
    folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(folder, exist_ok=True)
    return folder


def _extension(filename):
    # أسماء الملفات العربية تفقد امتدادها مع secure_filename
    return os.path.splitext(filename or '')[1][1:].lower() or None


def _size(file):
    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    return size


def _check_image(file):
    if file is None or not file.filename:
        raise ValidationError(_('No image file provided'))
    if _extension(file.filename) not in current_app.config['ALLOWED_IMAGE_EXTENSIONS']:
        raise ValidationError(_('Only image files are allowed'))
    if _size(file) > current_app.config['MAX_IMAGE_SIZE']:
        raise ValidationError(_('Image is too large'))


def _store(file):
    filename = '%s.%s' % (uuid.uuid4().hex, _extension(file.filename))
    path = os.path.join(upload_folder(), filename)
    file.save(path)
    return {
        'url': '/uploads/' + filename,
        'filename': filename,
        'original_name': file.filename,
        'size': os.path.getsize(path),
    }


def save_image(file, user_id=None):
    """Save one uploaded image under a generated name."""
    _check_image(file)
    saved = _store(file)
    system_log.record('info', 'product', 'Image uploaded', saved, user_id=user_id)
    return saved


def save_images(files, user_id=None):
    """Save several images; nothing is written unless all of them are valid."""
    if not files:
        raise ValidationError(_('No image file provided'))
    if len(files) > current_app.config['MAX_UPLOAD_FILES']:
        raise ValidationError(_('Too many files'))
    for file in files:
        _check_image(file)
    saved = [_store(file) for file in files]
    system_log.record('info', 'product', 'Images uploaded',
                      {'filenames': [item['filename'] for item in saved]}, user_id=user_id)
    return saved


def delete_image(filename, user_id=None):
    # لا نقبل أي مسار خارج مجلد الرفع
    if not filename or secure_filename(filename) != filename:
        raise NotFound(_('Image not found'))
    path = os.path.join(upload_folder(), filename)
    if not os.path.isfile(path):
        raise NotFound(_('Image not found'))
    os.remove(path)
    system_log.record('info', 'product', 'Image deleted', {'filename': filename}, user_id=user_id)


def storage_info():
    folder = upload_folder()
    sizes = [entry.stat().st_size for entry in os.scandir(folder) if entry.is_file()]
    return {
        'count': len(sizes),
        'total_size': sum(sizes),
        'max_file_size': current_app.config['MAX_IMAGE_SIZE'],
        'allowed_extensions': sorted(current_app.config['ALLOWED_IMAGE_EXTENSIONS']),
    }
