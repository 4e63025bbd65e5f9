"""QML source for the document designer window."""

DESIGNER_QML = r"""
import QtQuick 2.15
import QtQuick.Controls 2.15
import QtQuick.Layouts 1.15

ApplicationWindow {
    id: root
    visible: true
    width: 1280
    height: 900
    title: "DriveFlow - " + templateModel.templateName
    color: "#f3f4f6"

    property real zoom: 0.75
    property var selectedData: {
        var rendered = templateModel.renderedElements
        return templateModel.selectedElementId !== "" ? templateModel.getElement(templateModel.selectedElementId) : ({})
    }
    property var propertyFields: [
        { key: "x", label: "X", numeric: true },
        { key: "y", label: "Y", numeric: true },
        { key: "width", label: "Largeur", numeric: true },
        { key: "height", label: "Hauteur", numeric: true },
        { key: "font_size", label: "Taille police", numeric: true },
        { key: "font_weight", label: "Graisse", numeric: false },
        { key: "color", label: "Couleur", numeric: false },
        { key: "background_color", label: "Fond", numeric: false },
        { key: "text_align", label: "Alignement", numeric: false },
        { key: "border_width", label: "Bordure", numeric: true },
        { key: "border_radius", label: "Arrondi", numeric: true },
        { key: "padding", label: "Marge", numeric: true },
        { key: "opacity", label: "Opacité", numeric: true },
        { key: "z_index", label: "Plan", numeric: true }
    ]

    function fieldValue(key) {
        if (!selectedData || selectedData.elementId === undefined)
            return ""
        if (selectedData[key] !== undefined)
            return String(selectedData[key])
        if (selectedData.style && selectedData.style[key] !== undefined)
            return String(selectedData.style[key])
        return ""
    }

    component ElementView: Rectangle {
        id: view
        property var draw: ({})
        property bool interactive: false
        property bool highlighted: false
        readonly property string elementId: draw && draw.elementId ? draw.elementId : ""
        readonly property var elementStyle: draw && draw.style ? draw.style : ({})
        readonly property var payload: draw && draw.payload ? draw.payload : ({})

        function alignment(value) {
            if (value === "center")
                return Text.AlignHCenter
            if (value === "right")
                return Text.AlignRight
            return Text.AlignLeft
        }

        x: draw && draw.x !== undefined ? draw.x : 0
        y: draw && draw.y !== undefined ? draw.y : 0
        width: draw && draw.width !== undefined ? draw.width : 0
        height: draw && draw.height !== undefined ? draw.height : 0
        color: elementStyle.background_color || "transparent"
        opacity: elementStyle.opacity !== undefined ? elementStyle.opacity : 1
        radius: elementStyle.border_radius || 0
        border.width: highlighted ? 2 : (elementStyle.border_width || 0)
        border.color: highlighted ? "#2563eb" : (elementStyle.border_color || "transparent")

        Component {
            id: textComponent
            Text {
                text: view.payload.text || ""
                wrapMode: Text.WordWrap
                color: view.elementStyle.color || "#111827"
                font.pixelSize: view.elementStyle.font_size || 12
                font.family: view.elementStyle.font_family || "Inter"
                font.weight: Number(view.elementStyle.font_weight || 400)
                font.letterSpacing: view.elementStyle.letter_spacing || 0
                lineHeight: view.elementStyle.line_height || 1
                horizontalAlignment: view.alignment(view.elementStyle.text_align)
            }
        }

        Component {
            id: logoComponent
            Item {
                Image {
                    anchors.fill: parent
                    visible: !view.payload.isPlaceholder
                    source: view.payload.image || ""
                    fillMode: Image.PreserveAspectCrop
                    clip: true
                }
                Rectangle {
                    anchors.fill: parent
                    visible: view.payload.isPlaceholder === true
                    color: "#f9fafb"
                    border.color: "#d1d5db"
                    Text {
                        anchors.centerIn: parent
                        text: view.payload.label || ""
                        font.bold: true
                        color: "#9ca3af"
                    }
                }
            }
        }

        Component {
            id: tableComponent
            Column {
                spacing: 4
                Row {
                    Repeater {
                        model: view.payload.headers || []
                        delegate: Text {
                            width: view.width / 3
                            text: modelData
                            font.bold: true
                            font.pixelSize: view.elementStyle.font_size || 10
                        }
                    }
                }
                Rectangle {
                    width: view.width
                    height: 1
                    color: "#e5e7eb"
                }
                Repeater {
                    model: view.payload.rows || []
                    delegate: Row {
                        property var cells: modelData
                        Repeater {
                            model: cells
                            delegate: Text {
                                width: view.width / 3
                                text: modelData
                                font.pixelSize: view.elementStyle.font_size || 10
                            }
                        }
                    }
                }
            }
        }

        Component {
            id: dividerComponent
            Rectangle {
                color: view.elementStyle.color || "#d1d5db"
            }
        }

        Component {
            id: signatureComponent
            Item {
                Text {
                    anchors.top: parent.top
                    width: parent.width
                    text: view.payload.caption || ""
                    horizontalAlignment: Text.AlignHCenter
                    font.pixelSize: view.elementStyle.font_size || 10
                    color: view.elementStyle.color || "#374151"
                }
                Rectangle {
                    anchors.bottom: parent.bottom
                    width: parent.width
                    height: 1
                    color: "#9ca3af"
                }
            }
        }

        Component {
            id: checklistComponent
            Column {
                spacing: 4
                Repeater {
                    model: view.payload.items || []
                    delegate: Row {
                        spacing: 6
                        Rectangle {
                            width: 12
                            height: 12
                            border.width: 1
                            border.color: "#6b7280"
                            color: modelData.checked ? "#16a34a" : "white"
                            MouseArea {
                                anchors.fill: parent
                                enabled: view.interactive
                                onClicked: templateModel.toggleChecklistItem(view.elementId, index)
                            }
                        }
                        Text {
                            text: modelData.label
                            font.pixelSize: view.elementStyle.font_size || 10
                            color: view.elementStyle.color || "#111827"
                        }
                    }
                }
            }
        }

        Component {
            id: fuelComponent
            Row {
                spacing: 24
                Column {
                    Text { text: view.payload.odometer_label || ""; font.pixelSize: 9; color: "#6b7280" }
                    Text { text: view.payload.odometer || ""; font.bold: true }
                }
                Column {
                    Text { text: view.payload.fuel_label || ""; font.pixelSize: 9; color: "#6b7280" }
                    Text { text: view.payload.fuel_level || ""; font.bold: true }
                }
            }
        }

        Component {
            id: qrComponent
            Grid {
                columns: 3
                spacing: 2
                Repeater {
                    model: 9
                    delegate: Rectangle {
                        width: (view.width - 8) / 3
                        height: (view.height - 8) / 3
                        color: "#111827"
                    }
                }
            }
        }

        Loader {
            anchors.fill: parent
            anchors.margins: view.elementStyle.padding || 0
            sourceComponent: {
                switch (view.draw ? view.draw.kind : "") {
                case "static_text":
                case "bound_text":
                    return textComponent
                case "logo":
                    return logoComponent
                case "table":
                    return tableComponent
                case "divider":
                    return dividerComponent
                case "signature_area":
                    return signatureComponent
                case "checklist":
                    return checklistComponent
                case "fuel_mileage":
                    return fuelComponent
                case "qr_placeholder":
                    return qrComponent
                }
                return null
            }
        }
    }

    Connections {
        target: templateManager
        function onErrorOccurred(message) { statusLabel.text = message }
        function onSaveCompleted(path) { statusLabel.text = "Enregistré: " + path }
        function onLoadCompleted(path) { statusLabel.text = "Chargé: " + path }
        function onExportCompleted(path) { statusLabel.text = "Imprimé: " + path }
    }

    header: ToolBar {
        RowLayout {
            anchors.fill: parent
            anchors.margins: 6
            spacing: 6

            ComboBox {
                id: categoryBox
                model: templateModel.categories
                onActivated: templateModel.loadDefaultTemplate(currentText)
            }
            Button {
                text: "Vierge"
                onClicked: templateModel.newBlankTemplate(categoryBox.currentText)
            }
            ComboBox {
                id: localeBox
                model: ["fr", "ar"]
                currentIndex: Math.max(0, find(templateModel.locale))
                onActivated: templateModel.locale = currentText
            }
            ToolSeparator {}
            Button {
                text: "Copier"
                enabled: templateModel.selectedElementId !== ""
                onClicked: templateModel.copySelectedToClipboard()
            }
            Button {
                text: "Coller"
                onClicked: templateModel.pasteFromClipboard()
            }
            Button {
                text: "Dupliquer"
                enabled: templateModel.selectedElementId !== ""
                onClicked: templateModel.duplicateSelected()
            }
            Button {
                text: "Supprimer"
                enabled: templateModel.selectedElementId !== ""
                onClicked: templateModel.deleteSelected()
            }
            ToolSeparator {}
            TextField {
                id: pathField
                Layout.fillWidth: true
                placeholderText: "modele.doctpl"
                text: templateManager.currentFilePath
            }
            Button {
                text: "Enregistrer"
                onClicked: templateManager.saveTemplate(pathField.text)
            }
            Button {
                text: "Ouvrir"
                onClicked: templateManager.loadTemplate(pathField.text)
            }
            ToolSeparator {}
            Button {
                text: "Aperçu"
                checkable: true
                checked: templateModel.previewMode
                onClicked: templateModel.previewMode = checked
            }
            Button {
                text: "Imprimer"
                onClicked: templateManager.exportPdf(pathField.text)
            }
        }
    }

    footer: Label {
        id: statusLabel
        padding: 6
        text: templateModel.count + " éléments"
    }

    RowLayout {
        anchors.fill: parent
        spacing: 0

        ScrollView {
            Layout.preferredWidth: 190
            Layout.fillHeight: true

            ColumnLayout {
                width: 180
                spacing: 4

                Label {
                    text: "Éléments"
                    font.bold: true
                    Layout.margins: 6
                }
                Repeater {
                    model: templateModel.elementKinds
                    delegate: Button {
                        text: modelData
                        Layout.fillWidth: true
                        Layout.leftMargin: 6
                        onClicked: templateModel.addElement(modelData)
                    }
                }
                Label {
                    text: "Variables"
                    font.bold: true
                    Layout.margins: 6
                }
                Repeater {
                    model: templateModel.placeholders
                    delegate: Button {
                        text: "{{" + modelData + "}}"
                        flat: true
                        Layout.fillWidth: true
                        Layout.leftMargin: 6
                        enabled: templateModel.editingElementId !== ""
                        onClicked: templateModel.setEditDraft(templateModel.editDraft + "{{" + modelData + "}}")
                    }
                }
            }
        }

        ScrollView {
            id: canvasScroll
            Layout.fillWidth: true
            Layout.fillHeight: true
            clip: true

            Item {
                implicitWidth: templateModel.canvasWidth * root.zoom + 80
                implicitHeight: templateModel.canvasHeight * root.zoom + 80

                Rectangle {
                    id: page
                    x: 40
                    y: 40
                    width: templateModel.canvasWidth
                    height: templateModel.canvasHeight
                    scale: root.zoom
                    transformOrigin: Item.TopLeft
                    color: "white"
                    border.color: "#d1d5db"

                    MouseArea {
                        anchors.fill: parent
                        z: -1000
                        onPressed: function(mouse) { templateModel.pointerDown("", mouse.x, mouse.y) }
                    }

                    Repeater {
                        model: templateModel
                        delegate: ElementView {
                            id: elementRect
                            draw: model.drawData
                            interactive: true
                            highlighted: model.selected
                            x: model.x
                            y: model.y
                            width: model.width
                            height: model.height
                            z: model.zIndex

                            MouseArea {
                                anchors.fill: parent
                                z: -1
                                preventStealing: true
                                onPressed: function(mouse) {
                                    var point = mapToItem(page, mouse.x, mouse.y)
                                    templateModel.pointerDown(elementRect.elementId, point.x, point.y)
                                }
                                onPositionChanged: function(mouse) {
                                    if (!pressed)
                                        return
                                    var point = mapToItem(page, mouse.x, mouse.y)
                                    templateModel.pointerMove(point.x, point.y)
                                }
                                onReleased: templateModel.pointerUp()
                                onDoubleClicked: templateModel.beginEdit(elementRect.elementId)
                            }

                            Loader {
                                anchors.fill: parent
                                active: model.editing
                                sourceComponent: Rectangle {
                                    color: "white"
                                    border.color: "#2563eb"
                                    TextArea {
                                        id: editor
                                        anchors.fill: parent
                                        text: templateModel.editDraft
                                        wrapMode: TextEdit.Wrap
                                        Component.onCompleted: forceActiveFocus()
                                        onTextChanged: {
                                            if (text !== templateModel.editDraft)
                                                templateModel.setEditDraft(text)
                                        }
                                        Keys.onEscapePressed: templateModel.cancelEdit()
                                        Keys.onReturnPressed: function(event) {
                                            if (event.modifiers & Qt.ControlModifier)
                                                templateModel.commitEdit()
                                            else
                                                event.accepted = false
                                        }
                                        Connections {
                                            target: templateModel
                                            function onEditingChanged() {
                                                if (editor.text !== templateModel.editDraft)
                                                    editor.text = templateModel.editDraft
                                            }
                                        }
                                    }
                                }
                            }

                            Rectangle {
                                width: 10
                                height: 10
                                anchors.right: parent.right
                                anchors.bottom: parent.bottom
                                visible: model.selected && !model.editing
                                color: "#2563eb"
                                MouseArea {
                                    anchors.fill: parent
                                    preventStealing: true
                                    cursorShape: Qt.SizeFDiagCursor
                                    onPressed: function(mouse) {
                                        var point = mapToItem(page, mouse.x, mouse.y)
                                        templateModel.beginResize(elementRect.elementId, point.x, point.y)
                                    }
                                    onPositionChanged: function(mouse) {
                                        if (!pressed)
                                            return
                                        var point = mapToItem(page, mouse.x, mouse.y)
                                        templateModel.pointerMove(point.x, point.y)
                                    }
                                    onReleased: templateModel.pointerUp()
                                }
                            }
                        }
                    }
                }
            }
        }

        ScrollView {
            Layout.preferredWidth: 260
            Layout.fillHeight: true
            visible: templateModel.selectedElementId !== ""

            ColumnLayout {
                width: 250
                spacing: 4

                Label {
                    text: templateModel.selectedElementId
                    font.bold: true
                    Layout.margins: 6
                }
                Repeater {
                    model: root.propertyFields
                    delegate: RowLayout {
                        Layout.leftMargin: 6
                        Label {
                            text: modelData.label
                            Layout.preferredWidth: 90
                        }
                        TextField {
                            Layout.fillWidth: true
                            text: root.fieldValue(modelData.key)
                            onEditingFinished: {
                                var changes = {}
                                changes[modelData.key] = modelData.numeric ? Number(text) : text
                                if (modelData.numeric && isNaN(changes[modelData.key]))
                                    return
                                templateModel.updateElement(templateModel.selectedElementId, changes)
                            }
                        }
                    }
                }
                Button {
                    text: "Modifier le texte"
                    Layout.leftMargin: 6
                    onClicked: templateModel.beginEdit(templateModel.selectedElementId)
                }
                Button {
                    text: "Valider"
                    Layout.leftMargin: 6
                    visible: templateModel.editingElementId !== ""
                    onClicked: templateModel.commitEdit()
                }
            }
        }
    }

    Rectangle {
        id: previewOverlay
        anchors.fill: parent
        visible: templateModel.previewMode
        color: "#e5e7eb"
        z: 100

        MouseArea {
            anchors.fill: parent
        }

        ScrollView {
            anchors.fill: parent
            clip: true

            Item {
                implicitWidth: templateModel.canvasWidth * root.zoom + 80
                implicitHeight: templateModel.canvasHeight * root.zoom + 80

                Rectangle {
                    x: 40
                    y: 40
                    width: templateModel.canvasWidth
                    height: templateModel.canvasHeight
                    scale: root.zoom
                    transformOrigin: Item.TopLeft
                    color: "white"
                    border.color: "#d1d5db"

                    Repeater {
                        model: templateModel.renderedElements
                        delegate: ElementView {
                            draw: modelData
                        }
                    }
                }
            }
        }

        Button {
            anchors.top: parent.top
            anchors.right: parent.right
            anchors.margins: 12
            text: "Fermer l'aperçu"
            onClicked: templateModel.previewMode = false
        }
    }
}
"""
