from urllib.parse import urlparse

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from ..api import ApiError
from ..auth import current_gate, forget_session, remember_gate
from ..cache import get_cache
from ..forms import LoginForm

users_bp = Blueprint('users', __name__)


def safe_next(target):
    if not target:
        return None
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc or not target.startswith('/'):
        return None
    return target


@users_bp.route("/login", methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('index'))
    form = LoginForm()
    if form.validate_on_submit():
        gate = current_gate()
        try:
            user = gate.login(form.username.data.strip(), form.password.data)
        except ApiError as e:
            remember_gate(gate)
            flash(f'Login Unsuccessful. {e.message}', 'danger')
        else:
            if not login_user(user):
                gate.logout()
                forget_session()
                remember_gate(gate)
                flash('This account has been deactivated.', 'danger')
                return render_template('login.html', title='Login', form=form)
            # fresh cache for the new backend session
            get_cache().clear()
            remember_gate(gate)
            flash(f'Welcome back, {user.full_name}!', 'success')
            next_page = safe_next(request.args.get('next'))
            return redirect(next_page) if next_page else redirect(url_for('index'))
    return render_template('login.html', title='Login', form=form)


@users_bp.route("/logout", methods=['GET', 'POST'])
@login_required
def logout():
    gate = current_gate()
    gate.logout()
    logout_user()
    forget_session()
    remember_gate(gate)
    flash('You have been logged out.', 'info')
    return redirect(url_for('users.login'))


@users_bp.route("/profile")
@login_required
def profile():
    return render_template('profile.html', title='Profile', user=current_user)
